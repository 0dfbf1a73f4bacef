"""Frame output for full-screen and fixed-height (inline) sessions."""

from __future__ import annotations

from collections.abc import Callable


class Renderer:
    """Redraw whole frames in place.

    Full-screen frames are drawn from the home position of the alternate
    screen. Inline frames move the cursor back to the first line of the
    previous frame, so the launcher stays below the shell prompt.
    """

    def __init__(self, write: Callable[[str], None], *, full_screen: bool = True) -> None:
        self._write = write
        self.full_screen = full_screen
        self._lines_drawn = 0

    def render(self, view: str) -> None:
        lines = view.split("\n") if view else []
        out: list[str] = []
        if self.full_screen:
            out.append("\x1b[H")
        elif self._lines_drawn > 1:
            out.append(f"\x1b[{self._lines_drawn - 1}A")
        out.append("\r")
        for index, line in enumerate(lines):
            out.append(line)
            out.append("\x1b[K")
            if index < len(lines) - 1:
                out.append("\r\n")
        out.append("\x1b[J")
        self._lines_drawn = max(1, len(lines))
        self._write("".join(out))

    def clear(self) -> None:
        self.render("")
