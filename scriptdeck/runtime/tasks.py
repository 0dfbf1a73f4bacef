"""Fire-and-forget background tasks feeding the single update loop."""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import Any

from .messages import Cmd

logger = logging.getLogger(__name__)


class TaskRunner:
    """Run each command on its own daemon thread and queue its result.

    Tasks never touch shared state; they only hand back one message (or the
    exception they raised), which ``drain`` returns in arrival order.
    ``synchronous`` runs commands inline, which tests use for determinism.
    """

    def __init__(self, *, synchronous: bool = False) -> None:
        self._synchronous = synchronous
        self._results: Queue[Any] = Queue()

    def _run(self, cmd: Cmd) -> None:
        try:
            msg = cmd()
        except Exception as exc:
            logger.debug("task %r raised", cmd, exc_info=True)
            msg = exc
        if msg is not None:
            self._results.put(msg)

    def spawn(self, cmd: Cmd | None) -> None:
        if cmd is None:
            return
        if self._synchronous:
            self._run(cmd)
            return
        worker = threading.Thread(
            target=self._run,
            args=(cmd,),
            name="scriptdeck-task",
            daemon=True,
        )
        worker.start()

    def drain(self) -> list[Any]:
        """Drain all completed task results."""
        out: list[Any] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out
