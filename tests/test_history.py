"""Tests for root-item history and the shell-command form."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from scriptdeck.extensions.types import RootItem
from scriptdeck.history import History, parse_flag_args, parse_shell_command, to_shell_command


class ShellCommandTests(unittest.TestCase):
    def test_flags_render_sorted_with_bare_true_and_omitted_false(self) -> None:
        item = RootItem(extension="gh", script="repos", with_={"name": "x y", "flag": True, "off": False})
        self.assertEqual(to_shell_command(item), "scriptdeck gh repos --flag --name='x y'")

    def test_round_trip_preserves_flags_and_escaping(self) -> None:
        item = RootItem(extension="gh", script="repos", with_={"flag": True, "name": "x"})
        extension, script, with_ = parse_shell_command(to_shell_command(item))
        self.assertEqual((extension, script), ("gh", "repos"))
        self.assertEqual(with_, {"flag": True, "name": "x"})

        tricky = RootItem(extension="gh", script="repos", with_={"name": "it's $HOME; rm"})
        self.assertEqual(parse_shell_command(to_shell_command(tricky))[2], {"name": "it's $HOME; rm"})

    def test_parse_flag_args_rejects_positionals(self) -> None:
        self.assertEqual(parse_flag_args(["--a=1", "--b"]), {"a": "1", "b": True})
        with self.assertRaises(ValueError):
            parse_flag_args(["oops"])
        with self.assertRaises(ValueError):
            parse_flag_args(["--"])


class HistoryTests(unittest.TestCase):
    def test_touch_persists_and_creates_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "state" / "history.json"
            history = History(path)
            history.touch("scriptdeck gh repos", now=1234.9)
            self.assertEqual(history.last_used("scriptdeck gh repos"), 1234)
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"scriptdeck gh repos": 1234})
            self.assertEqual(History(path).last_used("scriptdeck gh repos"), 1234)

    def test_missing_or_corrupt_history_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "history.json"
            self.assertEqual(History(path).load(), {})
            path.write_text("not json", encoding="utf-8")
            self.assertEqual(History(path).load(), {})
            path.write_text(json.dumps({"a": "x", "b": 5}), encoding="utf-8")
            self.assertEqual(History(path).load(), {"b": 5})

    def test_write_failure_is_raised_and_memory_kept(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("", encoding="utf-8")
            history = History(blocker / "history.json")
            with self.assertRaises(OSError):
                history.touch("key", now=5)
            self.assertEqual(history.last_used("key"), 5)
