"""Tests for ANSI-aware measuring, clipping and wrapping.

Page layouts lean on these to keep styled extension output aligned.
"""

import unittest

from scriptdeck import ansi as ansi_mod


class DisplayWidthTests(unittest.TestCase):
    def test_escape_sequences_take_no_columns(self) -> None:
        self.assertEqual(ansi_mod.display_width("\x1b[31mab\x1b[0m"), 2)

    def test_wide_characters_take_two_columns(self) -> None:
        self.assertEqual(ansi_mod.display_width("日本"), 4)


class LineShapingTests(unittest.TestCase):
    def test_clip_keeps_escapes_and_cuts_text(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("\x1b[1mabcdef", 3), "\x1b[1mabc")

    def test_pad_fills_to_width(self) -> None:
        self.assertEqual(ansi_mod.pad_ansi_line("ab", 4), "ab  ")

    def test_wrap_splits_to_width(self) -> None:
        self.assertEqual(ansi_mod.wrap_ansi_line("abcdef", 3), ["abc", "def"])

    def test_wrap_handles_empty_input(self) -> None:
        self.assertEqual(ansi_mod.wrap_ansi_line("", 5), [""])


if __name__ == "__main__":
    unittest.main()
