"""Main interactive event loop.

One update step at a time: poll the terminal size, drain finished task
results, render when the view changed, then wait briefly for a key. Every
command returned by the model is spawned as a background task.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..input import read_key
from .messages import KeyMsg, QuitMsg, WindowSizeMsg, quit_cmd
from .renderer import Renderer
from .tasks import TaskRunner
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 50


def run_program(
    model: Any,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    tasks: TaskRunner | None = None,
    timing: ProgramTiming = ProgramTiming(),
    get_terminal_size: Callable[..., os.terminal_size] = shutil.get_terminal_size,
    renderer: Renderer | None = None,
) -> Any:
    """Run ``model`` until it quits; returns the model for post-run inspection."""
    tasks = tasks if tasks is not None else TaskRunner()
    renderer = renderer if renderer is not None else Renderer(terminal.write, full_screen=model.is_full_screen)

    def dispatch(msg: Any) -> bool:
        """Apply one message; returns whether the loop should stop."""
        if isinstance(msg, QuitMsg):
            return True
        _, cmd = model.update(msg)
        if cmd is quit_cmd:
            return True
        tasks.spawn(cmd)
        return False

    with terminal.raw_mode():
        tasks.spawn(model.init())
        last_size: tuple[int, int] | None = None
        last_view: str | None = None
        while True:
            term = get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                if dispatch(WindowSizeMsg(width=size[0], height=size[1])):
                    break

            stop = False
            for msg in tasks.drain():
                if dispatch(msg):
                    stop = True
                    break
            if stop:
                break

            view = model.view()
            if view != last_view:
                renderer.render(view)
                last_view = view

            key = read_key(stdin_fd, timeout_ms=timing.key_poll_ms)
            if key and dispatch(KeyMsg(key)):
                break
        renderer.clear()
    return model
