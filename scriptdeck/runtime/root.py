"""The root list: every root item, most recently used first."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..config import APP_NAME
from ..extensions.types import Extension, RootItem, ScriptInputWithValue
from ..history import History, to_shell_command
from ..pages.items import ListItem
from ..pages.list import List
from ..ui_theme import DEFAULT_THEME, UITheme
from .actions import Action, copy_text_cmd
from .messages import Cmd, RunScriptMsg, ShowPrefMsg

logger = logging.getLogger(__name__)


def run_root_item_cmd(root_item: RootItem, history: History) -> Cmd:
    """Record the invocation in history, then ask the controller to run it."""
    key = to_shell_command(root_item)
    msg = RunScriptMsg(
        extension=root_item.extension,
        script=root_item.script,
        with_={name: ScriptInputWithValue(value=value) for name, value in root_item.with_.items()},
    )

    def run() -> RunScriptMsg:
        history.touch(key)
        return msg

    return run


def root_list_item(root_item: RootItem, extension: Extension, history: History) -> ListItem:
    shell_command = to_shell_command(root_item)
    actions = [
        Action(title="Run Script", cmd=run_root_item_cmd(root_item, history), shortcut="enter"),
        Action(
            title="Show Preferences",
            cmd=lambda: ShowPrefMsg(root_item.extension, root_item.script),
            shortcut="ctrl+p",
        ),
        Action(title="Copy as Shell Command", cmd=copy_text_cmd(shell_command), shortcut="ctrl+y"),
    ]
    return ListItem(
        id=shell_command,
        title=root_item.title or root_item.script,
        subtitle=root_item.subtitle or extension.title,
        accessories=(extension.title,) if root_item.subtitle else (),
        actions=actions,
    )


def build_root_list(
    root_items: Iterable[RootItem],
    registry: Mapping[str, Extension],
    history: History,
    *,
    theme: UITheme = DEFAULT_THEME,
) -> List:
    """Build the launcher's root page.

    Items naming an unknown extension or command are dropped. With an empty
    query, items are ordered by last use, newest first.
    """
    items: list[ListItem] = []
    seen: set[str] = set()
    for root_item in root_items:
        extension = registry.get(root_item.extension)
        if extension is None or root_item.script not in extension.commands:
            logger.warning("dropping root item %s/%s: not found", root_item.extension, root_item.script)
            continue
        item = root_list_item(root_item, extension, history)
        if item.id in seen:
            continue
        seen.add(item.id)
        items.append(item)

    page = List(APP_NAME, sort_key=lambda item: -history.last_used(item.id), theme=theme)
    page.set_items(items)
    return page
