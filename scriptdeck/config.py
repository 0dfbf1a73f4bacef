"""Persistent JSON config and per-user directories.

Stores the UI height policy, user-defined root items, and extra extension
search directories. All access is defensive: malformed or missing config falls
back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir, user_state_dir

from .errors import ExtensionError
from .extensions.types import RootItem

logger = logging.getLogger(__name__)

APP_NAME = "scriptdeck"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DATA_DIR = Path(user_data_dir(APP_NAME, appauthor=False))
STATE_DIR = Path(user_state_dir(APP_NAME, appauthor=False))
EXTENSIONS_DIR = DATA_DIR / "extensions"

REMOTE_PIPE_ENV = "SCRIPTDECK_REMOTE_PIPE"
LOG_FILE_ENV = "SCRIPTDECK_LOG_FILE"


@dataclass
class Config:
    """Effective launcher configuration.

    ``height`` of ``0`` selects the full-screen policy; any positive value caps
    pages at that many rows.
    """

    height: int = 0
    root_items: list[RootItem] = field(default_factory=list)
    extension_dirs: list[Path] = field(default_factory=list)


def load_config_data() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_height(value: object) -> int:
    """Booleans and non-integers are treated as invalid and coerced to ``0``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _load_root_items(value: object) -> list[RootItem]:
    if not isinstance(value, list):
        return []
    items: list[RootItem] = []
    for raw in value:
        try:
            items.append(RootItem.from_dict(raw))
        except ExtensionError as exc:
            logger.warning("ignoring root item in %s: %s", CONFIG_PATH, exc)
    return items


def _load_extension_dirs(value: object) -> list[Path]:
    dirs: list[Path] = []
    if isinstance(value, list):
        for raw in value:
            if isinstance(raw, str) and raw.strip():
                dirs.append(Path(raw.strip()).expanduser())
    if EXTENSIONS_DIR not in dirs:
        dirs.append(EXTENSIONS_DIR)
    return dirs


def load_config() -> Config:
    """Build a ``Config`` from disk, dropping invalid fields."""
    data = load_config_data()
    return Config(
        height=_coerce_height(data.get("height")),
        root_items=_load_root_items(data.get("rootItems")),
        extension_dirs=_load_extension_dirs(data.get("extensions")),
    )
