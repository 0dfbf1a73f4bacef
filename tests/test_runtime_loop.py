"""Tests for the program loop, renderer, and outer driver."""

from __future__ import annotations

import contextlib
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from scriptdeck.config import Config
from scriptdeck.extensions.loader import ExtensionRegistry
from scriptdeck.history import History
from scriptdeck.pages.detail import Detail
from scriptdeck.preferences import PreferenceStore
from scriptdeck.runtime import app
from scriptdeck.runtime.loop import ProgramTiming, run_program
from scriptdeck.runtime.messages import ExecCommandMsg
from scriptdeck.runtime.model import Model
from scriptdeck.runtime.renderer import Renderer
from scriptdeck.runtime.tasks import TaskRunner


class _FakeTerminal:
    def __init__(self) -> None:
        self.output: list[str] = []
        self.raw_entered = 0
        self.cleared = 0
        self.alt_screen = True

    def write(self, text: str) -> None:
        self.output.append(text)

    def clear_screen(self) -> None:
        self.cleared += 1

    @contextlib.contextmanager
    def raw_mode(self):
        self.raw_entered += 1
        yield


class LoopTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.model = Model(
            Config(),
            ExtensionRegistry(),
            store=PreferenceStore(root / "preferences.json"),
            history=History(root / "history.json"),
            root=Detail("Hello", "welcome text"),
            environ={},
        )
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)
        self._tmp.cleanup()

    def run_loop(self, keys: bytes) -> _FakeTerminal:
        terminal = _FakeTerminal()
        os.write(self.write_fd, keys)
        run_program(
            self.model,
            terminal,
            self.read_fd,
            tasks=TaskRunner(synchronous=True),
            timing=ProgramTiming(key_poll_ms=5),
            get_terminal_size=lambda fallback=(80, 24): os.terminal_size((40, 6)),
        )
        return terminal


class RunProgramTests(LoopTestCase):
    def test_ctrl_c_stops_loop_after_rendering(self) -> None:
        terminal = self.run_loop(b"\x03")
        self.assertEqual(terminal.raw_entered, 1)
        self.assertTrue(self.model.exit)
        self.assertIn("welcome text", "".join(terminal.output))
        self.assertEqual((self.model.width, self.model.height), (40, 6))

    def test_esc_on_root_pops_to_quit(self) -> None:
        self.run_loop(b"\x1b")
        self.assertFalse(self.model.exit)
        self.assertFalse(self.model.hidden)


class RendererTests(unittest.TestCase):
    def test_inline_redraw_moves_back_to_first_line(self) -> None:
        written: list[str] = []
        renderer = Renderer(written.append, full_screen=False)
        renderer.render("a\nb\nc")
        renderer.render("d")
        self.assertEqual(written[0], "\ra\x1b[K\r\nb\x1b[K\r\nc\x1b[K\x1b[J")
        self.assertTrue(written[1].startswith("\x1b[2A\r"))

    def test_full_screen_draws_from_home(self) -> None:
        written: list[str] = []
        Renderer(written.append).render("x")
        self.assertTrue(written[0].startswith("\x1b[H"))


class DriverTests(LoopTestCase):
    def test_deferred_command_runs_after_loop(self) -> None:
        msg = ExecCommandMsg(command="exit 4")

        def fake_run_program(model, terminal, stdin_fd, **kwargs):
            model.exit_cmd = msg
            return model

        with mock.patch.object(app, "run_program", side_effect=fake_run_program), mock.patch.object(
            app, "TerminalController"
        ):
            status = app.draw(self.model, stdin_fd=self.read_fd, stdout_fd=self.write_fd)
        self.assertEqual(status, 4)

    def test_remote_mode_relays_hide_and_restarts_until_exit(self) -> None:
        relay = mock.Mock()
        runs: list[int] = []

        def fake_run_program(model, terminal, stdin_fd, **kwargs):
            runs.append(1)
            model.hidden = True
            model.exit = len(runs) == 2
            return model

        with mock.patch.object(app, "run_program", side_effect=fake_run_program), mock.patch.object(
            app, "TerminalController"
        ):
            app.draw(self.model, stdin_fd=self.read_fd, stdout_fd=self.write_fd, relay=relay)
        self.assertEqual(len(runs), 2)
        relay.send.assert_called_once_with({"action": "hide"})

    def test_configure_logging_honours_env_override(self) -> None:
        path = Path(self._tmp.name) / "logs" / "debug.log"
        with mock.patch.object(app.logging, "basicConfig") as basic_config:
            resolved = app.configure_logging({"SCRIPTDECK_LOG_FILE": str(path)})
        self.assertEqual(resolved, path)
        self.assertTrue(path.parent.is_dir())
        self.assertEqual(basic_config.call_args.kwargs["filename"], str(path))
