"""Navigation controller.

``Model`` owns the page stack and handles the messages that are not specific
to one page: quitting, resizing, side effects, running scripts, and errors.
Everything else is delegated to the page on top of the stack (or the root).
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from ..config import Config
from ..errors import CommandFailedError, LookupFailedError, ScriptdeckError
from ..extensions.loader import ExtensionRegistry
from ..extensions.types import Command, Extension
from ..history import History
from ..pages.base import Page
from ..pages.detail import Detail
from ..preferences import PreferenceStore
from ..system import copy_text_to_clipboard, open_url
from ..ui_theme import DEFAULT_THEME, UITheme
from .messages import (
    Cmd,
    CommandOutput,
    CopyTextMsg,
    ExecCommandMsg,
    ExecDoneMsg,
    HideMsg,
    KeyMsg,
    OpenUrlMsg,
    PopMsg,
    PreferencesResolvedMsg,
    PreferencesSavedMsg,
    PushMsg,
    PushScriptMsg,
    RunScriptMsg,
    ShowPrefMsg,
    WindowSizeMsg,
    quit_cmd,
)
from .root import build_root_list
from .runner import PreferencesPage, ScriptRunner

logger = logging.getLogger(__name__)

ERROR_TITLE = "Error"
REQUIREMENT_TITLE = "Requirement not met"


def unmet_requirement_page(extension: Extension, *, theme: UITheme = DEFAULT_THEME) -> Detail | None:
    """Explain the first requirement missing from ``PATH``, if any."""
    for requirement in extension.requirements:
        if not requirement.check():
            content = f"requirement {requirement.which} not met.\nHomepage: {requirement.home_page}"
            return Detail(REQUIREMENT_TITLE, content, theme=theme)
    return None


class Model:
    """Root page plus a stack of pushed pages."""

    def __init__(
        self,
        config: Config,
        registry: ExtensionRegistry,
        *,
        store: PreferenceStore,
        history: History,
        root: Page | None = None,
        relay: Any = None,
        copy_text: Callable[[str], None] = copy_text_to_clipboard,
        open_url: Callable[[str], None] = open_url,
        environ: Mapping[str, str] | None = None,
        theme: UITheme = DEFAULT_THEME,
    ) -> None:
        self.config = config
        self.registry = registry
        self.store = store
        self.history = history
        self.relay = relay
        self.copy_text = copy_text
        self.open_url = open_url
        self.environ = dict(os.environ if environ is None else environ)
        self.theme = theme
        if root is None:
            root_items = [*config.root_items, *registry.root_items()]
            root = build_root_list(root_items, registry, history, theme=theme)
        self.root = root
        self.home = root
        self.pages: list[Page] = []
        self.width = 0
        self.height = 0
        self.hidden = False
        self.exit = False
        self.exit_cmd: ExecCommandMsg | None = None

    @property
    def is_full_screen(self) -> bool:
        return self.config.height <= 0

    def page_height(self, terminal_height: int) -> int:
        if self.is_full_screen:
            return terminal_height
        return min(self.config.height, terminal_height)

    def current(self) -> Page:
        return self.pages[-1] if self.pages else self.root

    def init(self) -> Cmd | None:
        return self.root.init()

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = self.page_height(height)
        self.root.set_size(self.width, self.height)
        for page in self.pages:
            page.set_size(self.width, self.height)

    def push(self, page: Page) -> Cmd | None:
        page.set_size(self.width, self.height)
        self.pages.append(page)
        return page.init()

    def pop(self) -> Cmd | None:
        if not self.pages:
            return quit_cmd
        self.pages.pop()
        return None

    def reset(self) -> None:
        """Forget per-session state before the UI is shown again."""
        self.hidden = False
        self.exit = False
        self.exit_cmd = None
        self.pages.clear()
        if self.root is not self.home:
            self.home.set_size(self.width, self.height)
            self.root = self.home

    def _replace_current(self, page: Any) -> None:
        page.set_size(self.width, self.height)
        if self.pages:
            self.pages[-1] = page
        else:
            self.root = page

    def show_error(self, error: BaseException) -> None:
        logger.error("%s: %s", type(error).__name__, error)
        self._replace_current(Detail(ERROR_TITLE, str(error), theme=self.theme))

    def _hide(self) -> Cmd:
        self.hidden = True
        return quit_cmd

    def _side_effect(self, record: dict[str, str], effect: Callable[[], None]) -> Cmd:
        if self.relay is not None:
            self.relay.send(record)
            return self._hide()

        def perform() -> HideMsg:
            effect()
            return HideMsg()

        return perform

    def resolve_command(self, extension_name: str, script: str) -> tuple[Extension, Command]:
        extension = self.registry.get(extension_name)
        if extension is None:
            raise LookupFailedError(f"extension not found: {extension_name}")
        command = extension.commands.get(script)
        if command is None:
            raise LookupFailedError(f"command not found: {extension_name}/{script}")
        return extension, command

    def _run_script(self, msg: RunScriptMsg) -> Cmd | None:
        extension, command = self.resolve_command(msg.extension, msg.script)
        unmet = unmet_requirement_page(extension, theme=self.theme)
        if unmet is not None:
            return self.push(unmet)
        if msg.on_success:
            command = replace(command, on_success=msg.on_success)
        runner = ScriptRunner(extension, command, msg.with_, store=self.store, environ=self.environ, theme=self.theme)
        return self.push(runner)

    def _push_script(self, msg: PushScriptMsg) -> Cmd | None:
        extension = self.registry.get(msg.extension)
        if extension is None:
            raise LookupFailedError(f"extension not found: {msg.extension}")
        runner = ScriptRunner.for_script(
            extension,
            msg.path,
            msg.args,
            msg.method,
            store=self.store,
            environ=self.environ,
            theme=self.theme,
        )
        return self.push(runner)

    def _show_preferences(self, msg: ShowPrefMsg) -> Cmd:
        extension = self.registry.get(msg.extension)
        if extension is None:
            raise LookupFailedError(f"extension not found: {msg.extension}")
        command = None
        if msg.script:
            command = extension.commands.get(msg.script)
            if command is None:
                raise LookupFailedError(f"command not found: {msg.extension}/{msg.script}")
        store, theme = self.store, self.theme
        return lambda: PushMsg(PreferencesPage(extension, command, store=store, theme=theme))

    def _exec_command(self, msg: ExecCommandMsg) -> Cmd:
        if msg.is_deferred:
            self.exit_cmd = msg
            return self._hide()

        def run() -> Any:
            completed = subprocess.run(
                ["sh", "-c", msg.command],
                cwd=msg.directory or None,
                env=dict(msg.env) or None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
            if completed.returncode != 0:
                raise CommandFailedError(completed.returncode, completed.stdout)
            result = msg.on_success_msg(completed.stdout)
            if isinstance(result, Exception):
                return result
            return ExecDoneMsg(msg.origin, result)

        return run

    def _exec_done(self, msg: ExecDoneMsg) -> Cmd | None:
        for index, page in enumerate(self.pages):
            if page is msg.origin:
                del self.pages[index]
                break
        return self._handle(msg.result)

    def _route_to_runner(self, msg: Any) -> Cmd | None:
        """Deliver a task result to the runner that asked for it, wherever it sits."""
        for page in (self.root, *self.pages):
            if isinstance(page, ScriptRunner) and page.id == msg.runner_id:
                _, cmd = page.update(msg)
                return cmd
        logger.debug("dropping %s for closed runner %s", type(msg).__name__, msg.runner_id)
        return None

    def _handle(self, msg: Any) -> Cmd | None:
        if isinstance(msg, KeyMsg):
            if msg.key == "ctrl+c":
                self.exit = True
                return self._hide()
            if msg.key == "ctrl+w":
                return self._hide()
        elif isinstance(msg, WindowSizeMsg):
            self.set_size(msg.width, msg.height)
            return None
        elif isinstance(msg, HideMsg):
            return self._hide()
        elif isinstance(msg, CopyTextMsg):
            text = msg.text
            return self._side_effect({"action": "copy-text", "text": text}, lambda: self.copy_text(text))
        elif isinstance(msg, OpenUrlMsg):
            url = msg.url
            return self._side_effect({"action": "open-url", "url": url}, lambda: self.open_url(url))
        elif isinstance(msg, ShowPrefMsg):
            return self._show_preferences(msg)
        elif isinstance(msg, RunScriptMsg):
            return self._run_script(msg)
        elif isinstance(msg, PushScriptMsg):
            return self._push_script(msg)
        elif isinstance(msg, ExecCommandMsg):
            return self._exec_command(msg)
        elif isinstance(msg, ExecDoneMsg):
            return self._exec_done(msg)
        elif isinstance(msg, (CommandOutput, PreferencesResolvedMsg, PreferencesSavedMsg)):
            return self._route_to_runner(msg)
        elif isinstance(msg, PushMsg):
            return self.push(msg.page)
        elif isinstance(msg, PopMsg):
            return self.pop()
        elif isinstance(msg, Exception):
            self.show_error(msg)
            return None

        page = self.current()
        updated, cmd = page.update(msg)
        if updated is not page:
            self._replace_current(updated)
        return cmd

    def update(self, msg: Any) -> tuple[Model, Cmd | None]:
        try:
            return self, self._handle(msg)
        except ScriptdeckError as exc:
            self.show_error(exc)
            return self, None

    def view(self) -> str:
        if self.hidden:
            return ""
        return self.current().view()
