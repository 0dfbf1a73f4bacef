"""Script execution pipeline.

A ``ScriptRunner`` is the page pushed for one command invocation. It resolves
preferences, then parameters, then runs the command and renders its output as
a list or detail page. Blocking work (the preference store and the child
process) runs in tasks that answer with a message tagged by runner id.
"""

from __future__ import annotations

import itertools
import logging
import os
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from ..errors import CommandFailedError, LookupFailedError, ScriptdeckError
from ..extensions.loader import load_script
from ..extensions.types import (
    Command,
    Extension,
    ScriptAction,
    ScriptInput,
    ScriptInputWithValue,
    ScriptItem,
    parse_detail,
    parse_list_items,
)
from ..pages.detail import Detail
from ..pages.form import Form, new_form_item
from ..pages.items import list_item_from_script
from ..pages.list import List
from ..pages.pending import Pending
from ..preferences import Preference, PreferenceStore, preference_env_value
from ..ui_theme import DEFAULT_THEME, UITheme
from .messages import (
    Cmd,
    CommandOutput,
    ExecCommandMsg,
    PopMsg,
    PreferencesResolvedMsg,
    PreferencesSavedMsg,
    QueryChangedMsg,
    ReloadPageMsg,
    SubmitMsg,
    error_cmd,
)

logger = logging.getLogger(__name__)

PREFERENCES_FORM = "preferences"
PARAMS_FORM = "params"

_runner_ids = itertools.count(1)


def preference_inputs(extension: Extension, command: Command | None) -> list[ScriptInput]:
    """Extension preferences overlaid by the command's, keyed by name."""
    merged: dict[str, ScriptInput] = {pref.name: pref for pref in extension.preferences}
    if command is not None:
        merged.update((pref.name, pref) for pref in command.preferences)
    return list(merged.values())


def preferences_from_values(
    extension: Extension,
    command: Command | None,
    values: Mapping[str, object],
) -> list[Preference]:
    """Scope submitted values to the command when it declares them, else the extension."""
    command_names = {pref.name for pref in command.preferences} if command is not None else set()
    return [
        Preference(
            extension=extension.name,
            name=name,
            value=value,
            script=command.name if command is not None and name in command_names else "",
        )
        for name, value in values.items()
    ]


def resolve_preferences(
    store: PreferenceStore,
    extension: Extension,
    command: Command,
    environ: Mapping[str, str],
) -> tuple[dict[str, str], list[ScriptInput]]:
    """Return ``(extra_env, missing)`` for the declared preferences.

    Variables already in ``environ`` are inherited and stored values are added
    to ``extra_env``. Everything else is missing and goes to the Preferences
    form, which offers declared defaults as initial values.
    """
    extra: dict[str, str] = {}
    missing: list[ScriptInput] = []
    for pref in preference_inputs(extension, command):
        if pref.name in environ:
            continue
        stored = store.get(extension.name, command.name, pref.name)
        if stored is not None and stored.value is not None:
            extra[pref.name] = preference_env_value(stored.value)
        else:
            missing.append(pref)
    return extra, missing


def _stamp_action(action: ScriptAction, extension: str, directory: str) -> ScriptAction:
    return replace(action, extension=action.extension or extension, dir=action.dir or directory)


def _stamp_actions(actions: Iterable[ScriptAction], extension: str, directory: str) -> tuple[ScriptAction, ...]:
    return tuple(_stamp_action(action, extension, directory) for action in actions)


class ScriptRunner:
    """Page driving one command from preference resolution to rendered output."""

    def __init__(
        self,
        extension: Extension,
        command: Command,
        with_: Mapping[str, object] | None = None,
        *,
        store: PreferenceStore,
        environ: Mapping[str, str] | None = None,
        stdin: str | None = None,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.id = next(_runner_ids)
        self.extension = extension
        self.command = command
        self.store = store
        self.environ = dict(os.environ if environ is None else environ)
        self.stdin = stdin
        self.theme = theme
        self.directory = str(command.root or extension.root)
        self.with_: dict[str, ScriptInputWithValue] = {
            script_input.name: ScriptInputWithValue(input=script_input) for script_input in command.inputs
        }
        self.merge(with_ or {})
        self.extra_env: dict[str, str] = {}
        self.preferences_resolved = False
        self.request_id = 0
        self.page: Any = Pending(command.title, theme=theme)
        self.width = 0
        self.height = 0

    @classmethod
    def for_script(
        cls,
        extension: Extension,
        path: str,
        args: Iterable[str] = (),
        method: str = "args",
        *,
        store: PreferenceStore,
        environ: Mapping[str, str] | None = None,
        theme: UITheme = DEFAULT_THEME,
    ) -> ScriptRunner:
        """Runner for a ``push`` action: a bare script bound to args or stdin."""
        args = tuple(args)
        if method == "args":
            command = load_script(Path(path), args)
            stdin = None
        elif method == "stdin":
            command = load_script(Path(path))
            stdin = " ".join(args) + "\n"
        else:
            raise LookupFailedError(f"unknown push method: {method}")
        return cls(extension, command, store=store, environ=environ, stdin=stdin, theme=theme)

    @property
    def title(self) -> str:
        return self.command.title

    def merge(self, with_: Mapping[str, object]) -> None:
        """Merge parameter overrides; ``ScriptInputWithValue`` entries keep their default."""
        for name, raw in with_.items():
            current = self.with_.get(name)
            if current is None:
                current = self.with_[name] = ScriptInputWithValue()
            if isinstance(raw, ScriptInputWithValue):
                if raw.value is not None:
                    current.value = raw.value
                if raw.default is not None:
                    current.default = raw.default
            elif raw is not None:
                current.value = raw

    def values(self) -> dict[str, object]:
        return {
            name: item.get_value()
            for name, item in self.with_.items()
            if item.input is not None or item.is_resolved
        }

    def child_env(self) -> dict[str, str]:
        return {**self.environ, **self.extra_env}

    def _show(self, page: Any) -> None:
        self.page = page
        self.page.set_size(self.width, self.height)

    def _set_loading(self, loading: bool) -> None:
        if isinstance(self.page, (List, Detail, Form)):
            self.page.set_is_loading(loading)

    def init(self) -> Cmd | None:
        return self.run()

    def run(self) -> Cmd | None:
        """Restart the pipeline; cached preferences skip straight to parameters."""
        if not self.preferences_resolved:
            return self.check_preferences()
        return self.check_missing_parameters()

    def check_preferences(self) -> Cmd:
        runner_id = self.id
        store, extension, command, environ = self.store, self.extension, self.command, dict(self.environ)

        def resolve() -> PreferencesResolvedMsg:
            extra, missing = resolve_preferences(store, extension, command, environ)
            return PreferencesResolvedMsg(runner_id, extra, tuple(missing))

        return resolve

    def _preferences_resolved(self, msg: PreferencesResolvedMsg) -> Cmd | None:
        if msg.missing:
            title = f"{self.extension.title} · Preferences"
            self._show(Form(PREFERENCES_FORM, title, [new_form_item(pref) for pref in msg.missing], theme=self.theme))
            return None
        self.extra_env = dict(msg.env)
        self.preferences_resolved = True
        return self.check_missing_parameters()

    def check_missing_parameters(self) -> Cmd | None:
        unresolved = [
            item.input for item in self.with_.values() if item.input is not None and not item.is_resolved
        ]
        if unresolved:
            title = f"{self.command.title} · Params"
            self._show(Form(PARAMS_FORM, title, [new_form_item(script_input) for script_input in unresolved], theme=self.theme))
            return None
        return self.execute()

    def execute(self) -> Cmd | None:
        try:
            command_line = self.command.render(self.values())
        except ScriptdeckError as exc:
            return error_cmd(exc)
        env = self.child_env()
        if self.command.on_success != "push-page":
            msg = ExecCommandMsg(
                command=command_line,
                directory=self.directory,
                env=env,
                on_success=self.command.on_success,
                origin=self,
            )
            return lambda: msg
        self._set_loading(True)
        return self.script_cmd(command_line, env)

    def _query(self) -> str:
        return self.page.query() if isinstance(self.page, List) else ""

    def script_cmd(self, command_line: str, env: Mapping[str, str]) -> Cmd:
        """Command running the child process for the next request."""
        self.request_id += 1
        runner_id, request_id = self.id, self.request_id
        directory = self.directory
        if self.command.page.is_generator:
            stdin = self._query()
        else:
            stdin = self.stdin or ""
        env = dict(env)

        def run_script() -> CommandOutput:
            logger.debug("running %r in %s", command_line, directory)
            completed = subprocess.run(
                ["sh", "-c", command_line],
                cwd=directory,
                env=env,
                input=stdin,
                capture_output=True,
                text=True,
            )
            if completed.returncode != 0:
                raise CommandFailedError(completed.returncode, completed.stderr)
            return CommandOutput(runner_id, request_id, completed.stdout)

        return run_script

    def _list_items(self, output: str) -> list[Any]:
        items: list[ScriptItem] = parse_list_items(output)
        converted = []
        for index, item in enumerate(items):
            item = replace(
                item,
                id=item.id or str(index),
                actions=_stamp_actions(item.actions, self.extension.name, self.directory),
            )
            converted.append(list_item_from_script(item, self.environ))
        return converted

    def render(self, output: str) -> Cmd | None:
        page_type = self.command.page.type
        if page_type == "detail":
            detail = parse_detail(output)
            detail = replace(detail, actions=_stamp_actions(detail.actions, self.extension.name, self.directory))
            if not isinstance(self.page, Detail):
                self._show(Detail(self.command.title, theme=self.theme))
            self.page.set_is_loading(False)
            return self.page.set_detail(detail, self.environ)
        if page_type == "list":
            items = self._list_items(output)
            if not isinstance(self.page, List):
                page = List(self.command.title, theme=self.theme)
                page.dynamic = self.command.page.is_generator
                page.show_preview = self.command.page.show_preview
                self._show(page)
            self.page.set_is_loading(False)
            return self.page.set_items(items)
        raise LookupFailedError(f"unknown page type: {page_type!r}")

    def _command_output(self, msg: CommandOutput) -> Cmd | None:
        if msg.runner_id != self.id or msg.request_id != self.request_id:
            logger.debug("discarding stale output for runner %s request %s", msg.runner_id, msg.request_id)
            return None
        try:
            return self.render(msg.output)
        except ScriptdeckError as exc:
            return error_cmd(exc)

    def _submit(self, msg: SubmitMsg) -> Cmd | None:
        if msg.name == PREFERENCES_FORM:
            preferences = preferences_from_values(self.extension, self.command, msg.values)
            store, runner_id = self.store, self.id
            self._set_loading(True)

            def save() -> PreferencesSavedMsg:
                store.set(*preferences)
                return PreferencesSavedMsg(runner_id)

            return save
        if msg.name == PARAMS_FORM:
            for name in msg.values:
                item = self.with_.get(name)
                if item is None or item.input is None:
                    return error_cmd(LookupFailedError(f"unknown parameter: {name}"))
            self.merge(msg.values)
            return self.check_missing_parameters()
        return None

    def update(self, msg: Any) -> tuple[ScriptRunner, Cmd | None]:
        if isinstance(msg, CommandOutput):
            return self, self._command_output(msg)
        if isinstance(msg, PreferencesResolvedMsg):
            if msg.runner_id != self.id:
                return self, None
            return self, self._preferences_resolved(msg)
        if isinstance(msg, PreferencesSavedMsg):
            if msg.runner_id != self.id:
                return self, None
            self.preferences_resolved = False
            return self, self.run()
        if isinstance(msg, SubmitMsg):
            return self, self._submit(msg)
        if isinstance(msg, ReloadPageMsg):
            self.merge(msg.with_)
            return self, self.run()
        if isinstance(msg, QueryChangedMsg):
            if self.command.page.is_generator and isinstance(self.page, List):
                return self, self.execute()
            return self, None
        self.page, cmd = self.page.update(msg)
        return self, cmd

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.page.set_size(width, height)

    def view(self) -> str:
        return self.page.view()


class PreferencesPage:
    """Preferences form shown on demand; saving persists and pops."""

    def __init__(
        self,
        extension: Extension,
        command: Command | None,
        *,
        store: PreferenceStore,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.extension = extension
        self.command = command
        self.store = store
        script = command.name if command is not None else ""
        items = []
        for pref in preference_inputs(extension, command):
            stored = store.get(extension.name, script, pref.name)
            items.append(new_form_item(pref, stored.value if stored is not None else None))
        self.form = Form(PREFERENCES_FORM, f"{extension.title} · Preferences", items, theme=theme)

    def init(self) -> Cmd | None:
        return None

    def update(self, msg: Any) -> tuple[PreferencesPage, Cmd | None]:
        if isinstance(msg, SubmitMsg) and msg.name == PREFERENCES_FORM:
            preferences = preferences_from_values(self.extension, self.command, msg.values)
            store = self.store
            self.form.set_is_loading(True)

            def save() -> PopMsg:
                store.set(*preferences)
                return PopMsg()

            return self, save
        self.form, cmd = self.form.update(msg)
        return self, cmd

    def set_size(self, width: int, height: int) -> None:
        self.form.set_size(width, height)

    def view(self) -> str:
        return self.form.view()
