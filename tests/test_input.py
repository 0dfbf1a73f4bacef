"""Regression tests for raw-key decoding.

Covers ESC timing, CSI sequences, control keys, and UTF-8 characters.
"""

from __future__ import annotations

import os
import time
import unittest

from scriptdeck import input as input_mod


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _keys(self, data: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._keys(b"\x1b", 1)
        self.assertEqual(keys, ["esc"])
        self.assertLess(time.monotonic() - started, 0.2)

    def test_control_keys(self) -> None:
        keys = self._keys(b"\x03\x17\x10\x19\x13\r\t\x7f\n", 9)
        self.assertEqual(
            keys,
            ["ctrl+c", "ctrl+w", "ctrl+p", "ctrl+y", "ctrl+s", "enter", "tab", "backspace", "ctrl+j"],
        )

    def test_csi_sequences(self) -> None:
        keys = self._keys(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[Z\x1b[5~\x1b[6~\x1b[3~\x1bOH", 9)
        self.assertEqual(keys, ["up", "down", "right", "left", "shift+tab", "pgup", "pgdown", "delete", "home"])

    def test_modified_arrow(self) -> None:
        self.assertEqual(self._keys(b"\x1b[1;5C", 1), ["ctrl+right"])

    def test_alt_and_printable_keys(self) -> None:
        self.assertEqual(self._keys(b"\x1bxa ", 3), ["alt+x", "a", " "])

    def test_escape_does_not_swallow_following_control_key(self) -> None:
        self.assertEqual(self._keys(b"\x1b\x03", 2), ["esc", "ctrl+c"])

    def test_utf8_character_is_read_whole(self) -> None:
        self.assertEqual(self._keys("é✓".encode("utf-8"), 2), ["é", "✓"])

    def test_timeout_returns_empty(self) -> None:
        self.assertEqual(self._keys(b"", 1), [""])
