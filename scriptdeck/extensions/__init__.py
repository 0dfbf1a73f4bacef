"""Extension model and loading."""

from .loader import (
    MANIFEST_NAME,
    ExtensionRegistry,
    discover_extensions,
    load_extension,
    load_script,
    read_script_metadata,
)
from .types import (
    Command,
    Detail,
    Extension,
    PageSpec,
    Requirement,
    RootItem,
    ScriptAction,
    ScriptInput,
    ScriptInputWithValue,
    ScriptItem,
    parse_detail,
    parse_list_items,
    parse_with,
)

__all__ = [
    "MANIFEST_NAME",
    "Command",
    "Detail",
    "Extension",
    "ExtensionRegistry",
    "PageSpec",
    "Requirement",
    "RootItem",
    "ScriptAction",
    "ScriptInput",
    "ScriptInputWithValue",
    "ScriptItem",
    "discover_extensions",
    "load_extension",
    "load_script",
    "parse_detail",
    "parse_list_items",
    "parse_with",
    "read_script_metadata",
]
