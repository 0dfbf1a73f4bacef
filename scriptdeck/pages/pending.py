"""Loading placeholder shown before a runner has produced its first page."""

from __future__ import annotations

from typing import Any

from ..runtime.messages import Cmd, KeyMsg, pop_cmd
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import footer_line, frame, loading_line, separator


class Pending:
    def __init__(self, title: str, *, theme: UITheme = DEFAULT_THEME) -> None:
        self.title = title
        self.theme = theme
        self.width = 0
        self.height = 0

    def init(self) -> Cmd | None:
        return None

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def update(self, msg: Any) -> tuple[Pending, Cmd | None]:
        if isinstance(msg, KeyMsg) and msg.key == "esc":
            return self, pop_cmd
        return self, None

    def view(self) -> str:
        rows = max(1, self.height - 2)
        body = [loading_line(self.width, theme=self.theme)]
        body.extend([""] * (rows - len(body)))
        lines = [*body, separator(self.width, self.theme), footer_line(self.width, self.title, (), self.theme)]
        return frame(lines, self.width, self.height)
