"""Messages exchanged between pages, the controller, and background tasks.

A ``Cmd`` is a zero-argument callable run on a worker thread; it returns one
message or ``None``. Any ``Exception`` instance is itself a message and is
rendered by the controller's error page.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import LookupFailedError
from ..extensions.types import ScriptInputWithValue

Cmd = Callable[[], Any]


@dataclass(frozen=True)
class KeyMsg:
    key: str


@dataclass(frozen=True)
class WindowSizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class QuitMsg:
    pass


@dataclass(frozen=True)
class HideMsg:
    """A side effect completed; hide the UI and end the session."""


@dataclass(frozen=True)
class PushMsg:
    page: Any


@dataclass(frozen=True)
class PopMsg:
    pass


@dataclass(frozen=True)
class CopyTextMsg:
    text: str


@dataclass(frozen=True)
class OpenUrlMsg:
    url: str


@dataclass(frozen=True)
class ReloadPageMsg:
    with_: Mapping[str, ScriptInputWithValue] = field(default_factory=dict)


@dataclass(frozen=True)
class RunScriptMsg:
    extension: str
    script: str
    with_: Mapping[str, ScriptInputWithValue] = field(default_factory=dict)
    on_success: str = ""


@dataclass(frozen=True)
class ShowPrefMsg:
    extension: str
    script: str


@dataclass(frozen=True)
class PushScriptMsg:
    """Run a script that lives next to the current command and push its page."""

    extension: str
    path: str
    args: tuple[str, ...] = ()
    method: str = "args"


@dataclass(frozen=True)
class SubmitMsg:
    name: str
    values: Mapping[str, object]


@dataclass(frozen=True)
class QueryChangedMsg:
    query: str


@dataclass(frozen=True)
class CommandOutput:
    runner_id: int
    request_id: int
    output: str


@dataclass(frozen=True)
class PreferencesResolvedMsg:
    """Stored preference values read for a runner, plus the names still missing."""

    runner_id: int
    env: Mapping[str, str]
    missing: tuple[Any, ...] = ()


@dataclass(frozen=True)
class PreferencesSavedMsg:
    runner_id: int


@dataclass(frozen=True)
class ExecCommandMsg:
    """Shell command to run outside page rendering.

    Without ``on_success`` the command replaces the UI after exit and inherits
    stdio; otherwise its output is converted by :meth:`on_success_msg`.
    ``origin`` is the page that handed the command off, if any.
    """

    command: str
    directory: str = ""
    env: Mapping[str, str] = field(default_factory=dict)
    on_success: str = ""
    origin: Any = field(default=None, compare=False)

    @property
    def is_deferred(self) -> bool:
        return self.on_success in ("", "exit")

    def on_success_msg(self, output: str) -> Any:
        if self.on_success == "reload-page":
            return ReloadPageMsg()
        if self.on_success == "copy-text":
            return CopyTextMsg(output)
        if self.on_success == "open-url":
            return OpenUrlMsg(output.strip())
        if self.on_success == "open-path":
            return OpenUrlMsg(f"file://{output.strip()}")
        return LookupFailedError(f"unknown on-success action: {self.on_success}")


@dataclass(frozen=True)
class ExecDoneMsg:
    """A synchronous command succeeded; retire ``origin``, then apply ``result``."""

    origin: Any = field(compare=False)
    result: Any


def quit_cmd() -> QuitMsg:
    return QuitMsg()


def pop_cmd() -> PopMsg:
    return PopMsg()


def error_cmd(error: Exception) -> Cmd:
    return lambda: error
