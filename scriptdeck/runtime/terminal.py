"""Terminal control helpers for the launcher session.

Owns raw-mode lifecycle and, for the full-screen policy, alternate-screen
switching.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions for one stdin/stdout pair."""

    def __init__(self, stdin_fd: int, stdout_fd: int, *, alt_screen: bool = True) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.alt_screen = alt_screen
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def write(self, text: str) -> None:
        os.write(self.stdout_fd, text.encode("utf-8", errors="replace"))

    def enable_tui_mode(self) -> None:
        """Enter raw mode, optionally on the alternate screen, and hide the cursor."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        if self.alt_screen:
            os.write(self.stdout_fd, b"\x1b[?1049h")
        os.write(self.stdout_fd, b"\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore the tty."""
        os.write(self.stdout_fd, b"\x1b[?25h")
        if self.alt_screen:
            os.write(self.stdout_fd, b"\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def clear_screen(self) -> None:
        os.write(self.stdout_fd, b"\x1b[2J\x1b[H")

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
