"""Tests for CLI argument handling."""

from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from scriptdeck import cli
from scriptdeck.config import Config
from scriptdeck.runtime.runner import ScriptRunner


class CliTests(unittest.TestCase):
    def _main(self, argv: list[str]) -> int | str | None:
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as caught:
            cli.main(argv)
        return caught.exception.code

    def test_extension_without_script_is_rejected(self) -> None:
        self.assertEqual(self._main(["gh"]), 2)

    def test_flags_without_a_command_are_rejected(self) -> None:
        self.assertEqual(self._main(["--owner=me"]), 2)

    def test_negative_height_is_rejected(self) -> None:
        self.assertEqual(self._main(["--height", "-1"]), 2)

    def test_parser_collects_flags_as_unknown_args(self) -> None:
        args, extra = cli.build_parser().parse_known_args(["gh", "repos", "--owner=me", "--all"])
        self.assertEqual((args.extension, args.script), ("gh", "repos"))
        self.assertEqual(extra, ["--owner=me", "--all"])


class CliRunTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        extension = self.root / "exts" / "gh"
        extension.mkdir(parents=True)
        (extension / "scriptdeck.json").write_text(
            json.dumps({"commands": {"repos": {"command": "echo {{ owner }}", "inputs": [{"name": "owner"}], "page": "list"}}}),
            encoding="utf-8",
        )
        patches = [
            mock.patch("scriptdeck.cli.load_config", return_value=Config(extension_dirs=[self.root / "exts"])),
            mock.patch("scriptdeck.cli.PreferenceStore", return_value=mock.Mock()),
            mock.patch("scriptdeck.cli.History", return_value=mock.Mock()),
            mock.patch("scriptdeck.runtime.app.configure_logging"),
            mock.patch("scriptdeck.runtime.app.open_relay", return_value=None),
        ]
        for patch in patches:
            patch.start()
            self.addCleanup(patch.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_direct_run_uses_a_runner_as_root(self) -> None:
        with mock.patch("scriptdeck.cli.sys"), mock.patch(
            "scriptdeck.runtime.app.draw", return_value=0
        ) as draw:
            cli.main(["--height", "10", "gh", "repos", "--owner=me"])
        model = draw.call_args.args[0]
        self.assertIsInstance(model.root, ScriptRunner)
        self.assertEqual(model.root.with_["owner"].value, "me")
        self.assertEqual(model.config.height, 10)

    def test_unknown_command_exits_with_message(self) -> None:
        with self.assertRaises(SystemExit) as caught:
            cli.main(["gh", "nope"])
        self.assertEqual(caught.exception.code, "Command not found: gh/nope")

    def test_unknown_extension_exits_with_message(self) -> None:
        with self.assertRaises(SystemExit) as caught:
            cli.main(["nope", "x"])
        self.assertEqual(caught.exception.code, "Extension not found: nope")
