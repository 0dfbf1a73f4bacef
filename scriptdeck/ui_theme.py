"""UI theme definition.

Themes are UI-only ANSI palettes (chrome, list rows, forms). Syntax
highlighting style for detail content remains a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by page renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    bold: str
    title: str
    subtitle: str
    accessory: str
    query: str
    placeholder: str
    selected_marker: str
    spinner: str
    help_key: str
    help_dim: str
    field_label: str
    field_error: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    bold="\033[1m",
    title="\033[1;38;5;81m",
    subtitle="\033[2;38;5;250m",
    accessory="\033[38;5;109m",
    query="\033[1;38;5;81m",
    placeholder="\033[2;38;5;250m",
    selected_marker="\033[38;5;44m",
    spinner="\033[38;5;205m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    field_label="\033[1;38;5;252m",
    field_error="\033[38;5;203m",
)
