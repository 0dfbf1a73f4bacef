"""Outer driver: logging, the relay, and the show/hide session cycle."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..config import LOG_FILE_ENV, REMOTE_PIPE_ENV, STATE_DIR
from .loop import run_program
from .messages import ExecCommandMsg
from .relay import RemoteRelay
from .tasks import TaskRunner
from .terminal import TerminalController

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = STATE_DIR / "scriptdeck.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(environ: Mapping[str, str] | None = None) -> Path:
    """Send log records to ``$SCRIPTDECK_LOG_FILE`` or the state directory.

    The terminal belongs to the UI, so nothing is logged to stderr.
    """
    env = os.environ if environ is None else environ
    override = env.get(LOG_FILE_ENV, "").strip()
    path = Path(override).expanduser() if override else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(path),
        level=logging.DEBUG if override else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )
    return path


def open_relay(environ: Mapping[str, str] | None = None) -> RemoteRelay | None:
    env = os.environ if environ is None else environ
    pipe = env.get(REMOTE_PIPE_ENV, "").strip()
    if not pipe:
        return None
    logger.info("relaying effects to %s", pipe)
    return RemoteRelay(pipe).open()


def run_exit_command(msg: ExecCommandMsg) -> int:
    """Run a deferred command with inherited stdio once the UI is gone."""
    logger.info("running %r", msg.command)
    completed = subprocess.run(
        ["sh", "-c", msg.command],
        cwd=msg.directory or None,
        env=dict(msg.env) or None,
        check=False,
    )
    return completed.returncode


def draw(
    model: Any,
    *,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    relay: RemoteRelay | None = None,
) -> int:
    """Show the UI until it ends; in remote mode keep serving new sessions.

    Returns the exit status of the last deferred command, if one ran.
    """
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    while True:
        terminal = TerminalController(stdin_fd, stdout_fd, alt_screen=model.is_full_screen)
        run_program(model, terminal, stdin_fd, tasks=TaskRunner())
        status = 0
        if model.exit_cmd is not None:
            status = run_exit_command(model.exit_cmd)
        if relay is None:
            return status
        terminal.clear_screen()
        if model.exit:
            return status
        relay.send({"action": "hide"})
        model.reset()
