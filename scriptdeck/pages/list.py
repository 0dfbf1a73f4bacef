"""Searchable list page with optional preview pane."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from ..ansi import pad_ansi_line, wrap_text
from ..highlight import highlight_text
from ..runtime.actions import KeyBinding
from ..runtime.messages import Cmd, KeyMsg, QueryChangedMsg, pop_cmd
from ..ui_theme import DEFAULT_THEME, UITheme
from .action_list import ActionList
from .chrome import footer_line, frame, separator, spinner_frame
from .filter import Filter
from .items import ListItem
from .textinput import TextInput

# Header, two separators, and footer.
CHROME_ROWS = 4
PREVIEW_MIN_WIDTH = 60
PREVIEW_LIST_FRACTION = 0.4
_ACTIONS_BINDING = KeyBinding(keys=("tab",), help_key="⇥", help="Actions")


class List:
    """List page.

    Static lists filter locally as the query changes. ``dynamic`` lists leave
    filtering to their producer and emit ``QueryChangedMsg`` instead.
    """

    def __init__(
        self,
        title: str,
        *,
        sort_key: Callable[[ListItem], object] | None = None,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.title = title
        self.theme = theme
        self.header = TextInput(placeholder="Search...")
        self.header.focus()
        self.filter = Filter(sort_key)
        self.actions = ActionList(text_shortcuts=False)
        self.dynamic = False
        self.show_preview = False
        self.is_loading = False
        self.width = 0
        self.height = 0

    def init(self) -> Cmd | None:
        return None

    def query(self) -> str:
        return self.header.value

    def _preview_enabled(self) -> bool:
        return self.show_preview and self.width >= PREVIEW_MIN_WIDTH

    def _list_width(self) -> int:
        if self._preview_enabled():
            return max(1, int(self.width * PREVIEW_LIST_FRACTION))
        return self.width

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.filter.set_size(self._list_width(), max(1, height - CHROME_ROWS))
        self.actions.set_size(width, height)

    def set_items(self, items: Sequence[ListItem]) -> Cmd | None:
        self.filter.set_items(items)
        self.filter.filter_items("" if self.dynamic else self.query())
        self._sync_actions()
        return None

    def set_is_loading(self, loading: bool) -> Cmd | None:
        self.is_loading = loading
        return None

    def selection(self) -> ListItem | None:
        return self.filter.selection()

    def _sync_actions(self) -> None:
        selected = self.selection()
        self.actions.set_actions(selected.actions if selected is not None else [])
        self.actions.set_title(selected.title if selected is not None else self.title)

    def _query_changed(self) -> Cmd | None:
        query = self.header.value
        if self.dynamic:
            return lambda: QueryChangedMsg(query)
        self.filter.filter_items(query)
        self._sync_actions()
        return None

    def update(self, msg: Any) -> tuple[List, Cmd | None]:
        if not isinstance(msg, KeyMsg):
            return self, None
        key = msg.key

        handled, cmd = self.actions.update(key)
        if handled:
            return self, cmd

        if key == "esc":
            if self.header.value:
                self.header.set_value("")
                return self, self._query_changed()
            return self, pop_cmd
        if key in ("up", "ctrl+k"):
            self.filter.cursor_up()
            self._sync_actions()
            return self, None
        if key in ("down", "ctrl+j"):
            self.filter.cursor_down()
            self._sync_actions()
            return self, None
        if key == "enter":
            selected = self.selection()
            if selected is not None and selected.actions:
                return self, selected.actions[0].cmd
            return self, None
        if self.header.update(key):
            return self, self._query_changed()
        return self, None

    def _preview_lines(self, width: int, rows: int) -> list[str]:
        selected = self.selection()
        if selected is None or not selected.preview:
            return []
        return wrap_text(highlight_text(selected.preview, selected.language), width)[:rows]

    def view(self) -> str:
        theme = self.theme
        if self.actions.focused():
            return frame(self.actions.view(theme), self.width, self.height)

        prompt = f"{theme.spinner}{spinner_frame()}{theme.reset}" if self.is_loading else ">"
        lines = [f" {prompt} {self.header.view(theme)}", separator(self.width, theme)]

        rows = max(1, self.height - CHROME_ROWS)
        body = self.filter.view(theme)
        body.extend([""] * (rows - len(body)))
        if self._preview_enabled():
            list_width = self._list_width()
            preview_width = max(1, self.width - list_width - 3)
            preview = self._preview_lines(preview_width, rows)
            preview.extend([""] * (rows - len(preview)))
            divider = f" {theme.divider}│{theme.reset} "
            body = [
                f"{pad_ansi_line(left, list_width)}{divider}{right}"
                for left, right in zip(body, preview)
            ]
        lines.extend(body[:rows])

        bindings: list[KeyBinding] = []
        selected = self.selection()
        if selected is not None and selected.actions:
            bindings.append(selected.actions[0].binding())
            bindings.append(_ACTIONS_BINDING)
        lines.append(separator(self.width, theme))
        lines.append(footer_line(self.width, self.title, bindings, theme))
        return frame(lines, self.width, self.height)
