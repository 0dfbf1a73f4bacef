"""Extension discovery and manifest loading.

An extension is a directory holding a ``scriptdeck.json`` manifest. Bare
scripts pushed by ``push`` actions are described by header comments instead.
"""

from __future__ import annotations

import json
import logging
import re
import shlex
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from ..errors import ExtensionError
from .types import Command, Extension, PageSpec, Requirement, RootItem, ScriptInput

logger = logging.getLogger(__name__)

MANIFEST_NAME = "scriptdeck.json"
_SCRIPT_HEADER_RE = re.compile(r"^\s*(?:#|//)\s*@scriptdeck\.(\w+)\s+(.*?)\s*$")
_SCRIPT_HEADER_MAX_LINES = 40


def load_extension(root: Path) -> Extension:
    """Load and validate the manifest in ``root``."""
    root = root.resolve()
    manifest_path = root / MANIFEST_NAME
    try:
        raw = json.loads(manifest_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ExtensionError(f"cannot read {manifest_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ExtensionError(f"invalid JSON in {manifest_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ExtensionError(f"{manifest_path}: manifest must be an object")

    name = raw.get("name") or root.name
    if not isinstance(name, str):
        raise ExtensionError(f"{manifest_path}: 'name' must be a string")
    commands_raw = raw.get("commands", {})
    if not isinstance(commands_raw, dict):
        raise ExtensionError(f"{manifest_path}: 'commands' must be an object")

    try:
        commands = {key: Command.from_dict(key, value) for key, value in commands_raw.items()}
        preferences = tuple(ScriptInput.from_dict(item) for item in raw.get("preferences", ()) or ())
        requirements = tuple(Requirement.from_dict(item) for item in raw.get("requirements", ()) or ())
        root_items = tuple(RootItem.from_dict(item, extension=name) for item in raw.get("rootItems", ()) or ())
    except ExtensionError as exc:
        raise ExtensionError(f"{manifest_path}: {exc}") from exc

    for item in root_items:
        if item.script not in commands:
            raise ExtensionError(f"{manifest_path}: root item references unknown command {item.script!r}")

    title = raw.get("title") or name
    return Extension(
        name=name,
        root=root,
        title=str(title),
        commands=commands,
        preferences=preferences,
        requirements=requirements,
        root_items=root_items,
    )


def _candidate_roots(directories: Iterable[Path]) -> Iterator[Path]:
    for directory in directories:
        directory = directory.expanduser()
        if (directory / MANIFEST_NAME).is_file():
            yield directory
            continue
        if not directory.is_dir():
            continue
        for child in sorted(directory.iterdir(), key=lambda path: path.name.casefold()):
            if (child / MANIFEST_NAME).is_file():
                yield child


def discover_extensions(directories: Iterable[Path]) -> list[Extension]:
    """Load every extension under ``directories``.

    A directory may itself be an extension or contain extension directories.
    Broken manifests are logged and skipped; the first extension of a given
    name wins.
    """
    extensions: list[Extension] = []
    seen: set[str] = set()
    for root in _candidate_roots(directories):
        try:
            extension = load_extension(root)
        except ExtensionError as exc:
            logger.warning("skipping extension: %s", exc)
            continue
        if extension.name in seen:
            logger.warning("skipping duplicate extension %s at %s", extension.name, root)
            continue
        seen.add(extension.name)
        extensions.append(extension)
    return extensions


def read_script_metadata(path: Path) -> dict[str, str]:
    """Collect ``@scriptdeck.<key> <value>`` header comments from a script."""
    metadata: dict[str, str] = {}
    try:
        with path.open(encoding="utf-8", errors="replace") as handle:
            for line_no, line in enumerate(handle):
                if line_no >= _SCRIPT_HEADER_MAX_LINES:
                    break
                match = _SCRIPT_HEADER_RE.match(line)
                if match:
                    metadata[match.group(1)] = match.group(2)
    except OSError as exc:
        raise ExtensionError(f"cannot read script {path}: {exc}") from exc
    return metadata


def load_script(path: Path, args: Iterable[str] = ()) -> Command:
    """Describe a bare executable script as an ad-hoc list/detail command.

    ``args`` are appended as positional shell arguments.
    """
    path = path.resolve()
    if not path.is_file():
        raise ExtensionError(f"script not found: {path}")
    metadata = read_script_metadata(path)
    mode = metadata.get("mode", "list")
    try:
        page = PageSpec.from_dict(mode)
    except ExtensionError as exc:
        raise ExtensionError(f"{path}: {exc}") from exc
    command = " ".join(shlex.quote(part) for part in (str(path), *args))
    return Command(
        name=path.name,
        command=command,
        title=metadata.get("title", path.name),
        page=page,
        on_success="push-page",
        root=path.parent,
    )


class ExtensionRegistry(Mapping[str, Extension]):
    """Read-only name → extension mapping handed to the controller."""

    def __init__(self, extensions: Iterable[Extension] = ()) -> None:
        self._extensions: dict[str, Extension] = {}
        for extension in extensions:
            self._extensions.setdefault(extension.name, extension)

    def __getitem__(self, name: str) -> Extension:
        return self._extensions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._extensions)

    def __len__(self) -> int:
        return len(self._extensions)

    def root_items(self) -> list[RootItem]:
        return [item for extension in self._extensions.values() for item in extension.root_items]
