"""Root-item usage history and the re-invocation shell form.

History maps a root item's shell command to the Unix time it was last run.
The same shell command is what "Copy as Shell Command" puts on the clipboard.
"""

from __future__ import annotations

import json
import shlex
import threading
import time
from collections.abc import Iterable, Mapping
from pathlib import Path

from .config import APP_NAME, STATE_DIR
from .extensions.types import RootItem

HISTORY_PATH = STATE_DIR / "history.json"


def to_shell_command(root_item: RootItem, launcher: str = APP_NAME) -> str:
    """Render ``launcher <extension> <script> [--flag[=value]]*``.

    ``True`` flags render bare, ``False`` flags are omitted, and everything else
    is shell-quoted. Flags are sorted so the string is a stable history key.
    """
    args = [launcher, shlex.quote(root_item.extension), shlex.quote(root_item.script)]
    for name in sorted(root_item.with_):
        value = root_item.with_[name]
        if isinstance(value, bool):
            if value:
                args.append(f"--{name}")
            continue
        if value is None:
            continue
        args.append(f"--{name}={shlex.quote(str(value))}")
    return " ".join(args)


def parse_flag_args(args: Iterable[str]) -> dict[str, object]:
    """Decode ``--flag`` / ``--flag=value`` arguments into parameter values."""
    values: dict[str, object] = {}
    for arg in args:
        if not arg.startswith("--") or len(arg) == 2:
            raise ValueError(f"unexpected argument: {arg}")
        name, sep, value = arg[2:].partition("=")
        if not name:
            raise ValueError(f"unexpected argument: {arg}")
        values[name] = value if sep else True
    return values


def parse_shell_command(command: str) -> tuple[str, str, dict[str, object]]:
    """Inverse of :func:`to_shell_command`; returns ``(extension, script, with)``."""
    parts = shlex.split(command)
    if len(parts) < 3:
        raise ValueError(f"not a launcher command: {command!r}")
    return parts[1], parts[2], parse_flag_args(parts[3:])


class History:
    """Last-used timestamps keyed by shell command.

    Reads are permissive: a missing or corrupt file is an empty history.
    """

    def __init__(self, path: Path = HISTORY_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._entries = self.load()

    def load(self) -> dict[str, int]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        if not isinstance(data, Mapping):
            return {}
        return {
            key: value
            for key, value in data.items()
            if isinstance(key, str) and isinstance(value, int) and not isinstance(value, bool)
        }

    def last_used(self, key: str) -> int:
        with self._lock:
            return self._entries.get(key, 0)

    def touch(self, key: str, now: float | None = None) -> None:
        """Record ``key`` as used now and persist the whole map.

        The in-memory timestamp is kept even when the file cannot be written;
        the ``OSError`` is raised so the caller can report it.
        """
        with self._lock:
            self._entries[key] = int(time.time() if now is None else now)
            payload = dict(self._entries)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload), encoding="utf-8")
