"""Action dispatch: declarative script actions to runtime effects.

Each action resolves to a title, an optional shortcut, and a deferred ``Cmd``
that emits the message the controller or the owning runner acts on.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..errors import LookupFailedError
from ..extensions.types import ScriptAction
from .messages import (
    Cmd,
    CopyTextMsg,
    ExecCommandMsg,
    OpenUrlMsg,
    PushScriptMsg,
    ReloadPageMsg,
    RunScriptMsg,
    error_cmd,
)

DEFAULT_EDITOR = "vi"

_PRETTY_KEYS: tuple[tuple[str, str], ...] = (
    ("ctrl", "⌃"),
    ("alt", "⌥"),
    ("shift", "⇧"),
    ("cmd", "⌘"),
    ("enter", "↩"),
)


def pretty_key(shortcut: str) -> str:
    """Render modifier names as symbols for display."""
    for name, symbol in _PRETTY_KEYS:
        shortcut = shortcut.replace(name, symbol)
    return shortcut


@dataclass(frozen=True)
class KeyBinding:
    keys: tuple[str, ...]
    help_key: str
    help: str

    def matches(self, key: str) -> bool:
        return key in self.keys


@dataclass(frozen=True)
class Action:
    title: str
    cmd: Cmd
    shortcut: str = ""

    def binding(self) -> KeyBinding:
        keys = (self.shortcut,) if self.shortcut else ()
        return KeyBinding(keys=keys, help_key=pretty_key(self.shortcut), help=self.title)


def copy_text_cmd(text: str) -> Cmd:
    return lambda: CopyTextMsg(text)


def open_url_cmd(url: str) -> Cmd:
    return lambda: OpenUrlMsg(url)


def reload_page_cmd(with_: Mapping[str, object] | None = None) -> Cmd:
    return lambda: ReloadPageMsg(dict(with_ or {}))


def edit_cmd(path: str, environ: Mapping[str, str] | None = None) -> Cmd:
    """Open ``path`` in ``$EDITOR`` after the UI exits."""
    env = os.environ if environ is None else environ
    editor = env.get("EDITOR", "").strip() or DEFAULT_EDITOR
    return lambda: ExecCommandMsg(command=f"{editor} {shlex.quote(path)}")


def _resolve_push_path(action: ScriptAction) -> str:
    path = Path(action.path).expanduser()
    if not path.is_absolute() and action.dir:
        path = Path(action.dir) / path
    return str(path)


def new_action(script_action: ScriptAction, environ: Mapping[str, str] | None = None) -> Action:
    """Map a script action descriptor to a runtime ``Action``.

    Unknown action types become an "Unknown" action whose effect surfaces the
    lookup error instead of raising here.
    """
    title = script_action.title
    kind = script_action.type
    if kind == "copy-text":
        title = title or "Copy to Clipboard"
        cmd = copy_text_cmd(script_action.text)
    elif kind == "reload-page":
        title = title or "Reload Script"
        cmd = reload_page_cmd(script_action.with_)
    elif kind == "run-command":
        title = title or "Run Command"
        msg = RunScriptMsg(
            extension=script_action.extension,
            script=script_action.script,
            with_=dict(script_action.with_),
            on_success=script_action.on_success,
        )
        cmd = lambda: msg
    elif kind == "open-path":
        title = title or "Open"
        cmd = open_url_cmd(f"file://{script_action.path}")
    elif kind == "open-url":
        title = title or "Open in Browser"
        cmd = open_url_cmd(script_action.url)
    elif kind == "edit":
        title = title or "Edit File"
        cmd = edit_cmd(script_action.path, environ)
    elif kind == "push":
        title = title or "Open"
        msg = PushScriptMsg(
            extension=script_action.extension,
            path=_resolve_push_path(script_action),
            args=script_action.args,
            method=script_action.method,
        )
        cmd = lambda: msg
    else:
        title = "Unknown"
        cmd = error_cmd(LookupFailedError(f"unknown action type: {kind}"))
    return Action(title=title, cmd=cmd, shortcut=script_action.shortcut)
