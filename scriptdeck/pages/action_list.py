"""Searchable action palette attached to list and detail pages.

Unfocused, the palette is transparent except for ``tab`` and action
shortcuts. Focused, it captures typing for filtering and consumes navigation.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..runtime.actions import Action, KeyBinding
from ..runtime.messages import Cmd
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import footer_line, separator
from .filter import Filter
from .items import ListItem
from .textinput import TextInput, is_text_key

_PALETTE_BINDINGS = (
    KeyBinding(keys=("enter",), help_key="↩", help="Confirm"),
    KeyBinding(keys=("esc",), help_key="⎋", help="Hide Actions"),
)


class ActionList:
    def __init__(self, *, text_shortcuts: bool = True) -> None:
        self.text_shortcuts = text_shortcuts
        self.header = TextInput(placeholder="Search actions...")
        self.filter = Filter()
        self.actions: list[Action] = []
        self.title = "Actions"
        self.width = 0
        self.height = 0

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        # Header, two separators, and footer.
        self.filter.set_size(width, max(1, height - 4))

    def set_title(self, title: str) -> None:
        self.title = title

    def set_actions(self, actions: Sequence[Action]) -> None:
        self.actions = list(actions)
        self.filter.set_items(
            [
                ListItem(id=str(index), title=action.title, subtitle=action.binding().help_key, actions=[action])
                for index, action in enumerate(self.actions)
            ]
        )
        self.filter.filter_items(self.header.value)

    def focused(self) -> bool:
        return self.header.focused

    def focus(self) -> None:
        self.header.focus()

    def blur(self) -> None:
        self.header.blur()

    def clear(self) -> None:
        self.header.set_value("")
        self.filter.filter_items("")

    def _fire(self, action: Action) -> tuple[bool, Cmd | None]:
        self.clear()
        self.blur()
        return True, action.cmd

    def update(self, key: str) -> tuple[bool, Cmd | None]:
        """Handle one key; returns ``(handled, cmd)``."""
        focused = self.focused()
        if key in ("tab", "shift+tab"):
            if not focused:
                if not self.actions:
                    return False, None
                self.focus()
            elif key == "tab":
                self.filter.cursor_down()
            else:
                self.filter.cursor_up()
            return True, None

        if focused:
            if key == "esc":
                if self.header.value:
                    self.clear()
                else:
                    self.blur()
                return True, None
            if key == "enter":
                selected = self.filter.selection()
                if selected is None:
                    return True, None
                return self._fire(selected.actions[0])
            if key in ("up", "ctrl+k"):
                self.filter.cursor_up()
                return True, None
            if key in ("down", "ctrl+j"):
                self.filter.cursor_down()
                return True, None

        if not is_text_key(key) or (self.text_shortcuts and not focused):
            for action in self.actions:
                if action.binding().matches(key):
                    return self._fire(action)

        if not focused:
            return False, None
        if self.header.update(key):
            self.filter.filter_items(self.header.value)
        return True, None

    def view(self, theme: UITheme = DEFAULT_THEME) -> list[str]:
        lines = [f" {self.header.view(theme)}", separator(self.width, theme)]
        body = self.filter.view(theme)
        body.extend([""] * (self.filter.height - len(body)))
        lines.extend(body)
        lines.append(separator(self.width, theme))
        lines.append(footer_line(self.width, self.title, _PALETTE_BINDINGS, theme))
        return lines
