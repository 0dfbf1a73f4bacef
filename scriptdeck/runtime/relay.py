"""Remote relay: forward side effects to a calling shell over a named pipe.

Each record is written as one JSON line by a single writer thread, so a slow
reader never blocks the update loop.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Mapping
from pathlib import Path
from queue import Queue

logger = logging.getLogger(__name__)


class RemoteRelay:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._queue: Queue[dict[str, object] | None] = Queue()
        self._fd: int | None = None
        self._thread: threading.Thread | None = None
        self._created = False

    def open(self) -> RemoteRelay:
        """Create the FIFO if needed, open it, and start the writer thread."""
        if not self.path.exists():
            os.mkfifo(self.path)
            self._created = True
        # O_RDWR so opening a FIFO does not wait for a reader.
        self._fd = os.open(self.path, os.O_RDWR | os.O_CREAT | os.O_APPEND)
        self._thread = threading.Thread(target=self._run, name="scriptdeck-relay", daemon=True)
        self._thread.start()
        return self

    def send(self, record: Mapping[str, object]) -> None:
        self._queue.put(dict(record))

    def _run(self) -> None:
        while True:
            record = self._queue.get()
            if record is None:
                return
            line = json.dumps(record) + "\n"
            try:
                os.write(self._fd, line.encode("utf-8"))
            except OSError as exc:
                logger.error("relay write to %s failed: %s", self.path, exc)

    def close(self, timeout: float = 1.0) -> None:
        """Flush queued records, close the pipe, and remove a FIFO we created."""
        if self._thread is not None:
            self._queue.put(None)
            self._thread.join(timeout)
            self._thread = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        if self._created:
            self.path.unlink(missing_ok=True)
            self._created = False

    def __enter__(self) -> RemoteRelay:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()
