"""Scrollable text page used for command details and errors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..ansi import wrap_text
from ..extensions.types import Detail as DetailContent
from ..highlight import highlight_text
from ..runtime.actions import Action, KeyBinding, new_action
from ..runtime.messages import Cmd, KeyMsg, pop_cmd
from ..ui_theme import DEFAULT_THEME, UITheme
from .action_list import ActionList
from .chrome import footer_line, frame, loading_line, separator

# Separator and footer.
CHROME_ROWS = 2
_ACTIONS_BINDING = KeyBinding(keys=("tab",), help_key="⇥", help="Actions")


class Detail:
    def __init__(self, title: str, content: str = "", *, theme: UITheme = DEFAULT_THEME) -> None:
        self.title = title
        self.theme = theme
        self.content = content
        self.language = ""
        self.actions = ActionList()
        self.is_loading = False
        self.offset = 0
        self.width = 0
        self.height = 0
        self._lines: list[str] = []
        self._rebuild()

    def init(self) -> Cmd | None:
        return None

    def _rows(self) -> int:
        return max(1, self.height - CHROME_ROWS)

    def _rebuild(self) -> None:
        self._lines = wrap_text(highlight_text(self.content, self.language), max(1, self.width - 2))
        self._clamp()

    def _clamp(self) -> None:
        self.offset = max(0, min(self.offset, len(self._lines) - self._rows()))

    def set_size(self, width: int, height: int) -> None:
        resized = width != self.width
        self.width = width
        self.height = height
        self.actions.set_size(width, height)
        if resized:
            self._rebuild()
        else:
            self._clamp()

    def set_content(self, content: str, language: str = "") -> None:
        self.content = content
        self.language = language
        self.offset = 0
        self._rebuild()

    def set_actions(self, actions: list[Action]) -> None:
        self.actions.set_actions(actions)
        self.actions.set_title(self.title)

    def set_detail(self, detail: DetailContent, environ: Mapping[str, str] | None = None) -> Cmd | None:
        self.set_content(detail.content, detail.language)
        actions = []
        for index, script_action in enumerate(detail.actions):
            action = new_action(script_action, environ)
            if index == 0 and not action.shortcut:
                action = Action(title=action.title, cmd=action.cmd, shortcut="enter")
            actions.append(action)
        self.set_actions(actions)
        return None

    def set_is_loading(self, loading: bool) -> Cmd | None:
        self.is_loading = loading
        return None

    def update(self, msg: Any) -> tuple[Detail, Cmd | None]:
        if not isinstance(msg, KeyMsg):
            return self, None
        key = msg.key
        handled, cmd = self.actions.update(key)
        if handled:
            return self, cmd
        if key == "esc":
            return self, pop_cmd
        if key in ("up", "k"):
            self.offset -= 1
        elif key in ("down", "j"):
            self.offset += 1
        elif key in ("pgup", "b"):
            self.offset -= self._rows()
        elif key in ("pgdown", " "):
            self.offset += self._rows()
        elif key in ("home", "g"):
            self.offset = 0
        elif key in ("end", "G"):
            self.offset = len(self._lines)
        else:
            return self, None
        self._clamp()
        return self, None

    def view(self) -> str:
        theme = self.theme
        if self.actions.focused():
            return frame(self.actions.view(theme), self.width, self.height)

        rows = self._rows()
        if self.is_loading and not self.content:
            body = [loading_line(self.width, theme=theme)]
        else:
            body = [f" {line}" for line in self._lines[self.offset : self.offset + rows]]
        body.extend([""] * (rows - len(body)))

        bindings: list[KeyBinding] = []
        if self.actions.actions:
            bindings.append(self.actions.actions[0].binding())
            bindings.append(_ACTIONS_BINDING)
        title = self.title
        if self.is_loading and self.content:
            title = f"{title} …"
        lines = [*body, separator(self.width, theme), footer_line(self.width, title, bindings, theme)]
        return frame(lines, self.width, self.height)
