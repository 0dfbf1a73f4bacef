"""On-disk preference store.

Preferences are scoped to an extension (``script == ""``) or to one of its
commands. Command-scoped values shadow extension-scoped ones.
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from pathlib import Path

from .config import DATA_DIR

PREFERENCES_PATH = DATA_DIR / "preferences.json"


@dataclass(frozen=True)
class Preference:
    extension: str
    name: str
    value: object
    script: str = ""

    @property
    def key(self) -> tuple[str, str, str]:
        return self.extension, self.script, self.name


def preference_env_value(value: object) -> str:
    """Render a stored value the way child processes receive it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PreferenceStore:
    """JSON-file backed preference store safe to share across worker threads."""

    def __init__(self, path: Path = PREFERENCES_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict[tuple[str, str, str], Preference]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        if not isinstance(data, list):
            return {}
        out: dict[tuple[str, str, str], Preference] = {}
        for raw in data:
            if not isinstance(raw, dict):
                continue
            extension, name = raw.get("extension"), raw.get("name")
            script = raw.get("script") or ""
            if not isinstance(extension, str) or not isinstance(name, str) or not isinstance(script, str):
                continue
            preference = Preference(extension=extension, name=name, value=raw.get("value"), script=script)
            out[preference.key] = preference
        return out

    def get(self, extension: str, script: str, name: str) -> Preference | None:
        """Return the command-scoped value, else the extension-scoped one."""
        with self._lock:
            preferences = self._read()
        found = preferences.get((extension, script, name))
        if found is None and script:
            found = preferences.get((extension, "", name))
        return found

    def set(self, *preferences: Preference) -> None:
        """Upsert ``preferences`` and rewrite the file.

        Raises ``OSError`` when the store cannot be written.
        """
        if not preferences:
            return
        with self._lock:
            current = self._read()
            for preference in preferences:
                current[preference.key] = preference
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = [asdict(preference) for preference in current.values()]
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
