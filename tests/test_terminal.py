"""Tests for terminal mode transitions.

Verifies raw-mode lifecycle safety and the escape sequences written for the
full-screen and inline height policies.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from scriptdeck.runtime.terminal import TerminalController


class TerminalBehaviorTests(unittest.TestCase):
    def _patched(self):
        return (
            mock.patch("scriptdeck.runtime.terminal.termios.tcgetattr", return_value=[1, 2, 3]),
            mock.patch("scriptdeck.runtime.terminal.tty.setraw"),
            mock.patch("scriptdeck.runtime.terminal.os.write"),
            mock.patch("scriptdeck.runtime.terminal.termios.tcsetattr"),
        )

    def test_full_screen_uses_alternate_screen_sequences(self) -> None:
        getattr_patch, raw_patch, write_patch, setattr_patch = self._patched()
        with getattr_patch, raw_patch as setraw_mock, write_patch as write_mock, setattr_patch as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        written = [call.args[1] for call in write_mock.call_args_list]
        self.assertEqual(written, [b"\x1b[?1049h", b"\x1b[?25l", b"\x1b[?25h", b"\x1b[?1049l"])
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, [1, 2, 3])

    def test_inline_mode_keeps_the_main_screen(self) -> None:
        getattr_patch, raw_patch, write_patch, setattr_patch = self._patched()
        with getattr_patch, raw_patch, write_patch as write_mock, setattr_patch:
            controller = TerminalController(stdin_fd=0, stdout_fd=1, alt_screen=False)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        written = [call.args[1] for call in write_mock.call_args_list]
        self.assertEqual(written, [b"\x1b[?25l", b"\x1b[?25h"])

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("scriptdeck.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
