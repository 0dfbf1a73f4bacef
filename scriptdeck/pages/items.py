"""Renderable list entries."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from ..extensions.types import ScriptItem
from ..runtime.actions import Action, new_action


@dataclass
class ListItem:
    id: str
    title: str
    subtitle: str = ""
    preview: str = ""
    language: str = ""
    accessories: tuple[str, ...] = ()
    actions: list[Action] = field(default_factory=list)

    @property
    def filter_value(self) -> str:
        return f"{self.title} {self.subtitle}".strip()


def list_item_from_script(item: ScriptItem, environ: Mapping[str, str] | None = None) -> ListItem:
    """Convert a decoded script item; its first action answers ``enter``."""
    actions = []
    for index, script_action in enumerate(item.actions):
        if index == 0 and not script_action.shortcut:
            script_action = replace(script_action, shortcut="enter")
        actions.append(new_action(script_action, environ))
    return ListItem(
        id=item.id,
        title=item.title,
        subtitle=item.subtitle,
        preview=item.preview,
        language=item.language,
        accessories=item.accessories,
        actions=actions,
    )
