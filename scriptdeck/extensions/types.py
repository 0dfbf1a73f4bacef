"""Extension data model and command-response decoding.

Extensions are loaded once at startup and never mutated afterwards, so every
type here is a frozen dataclass. ``from_dict`` constructors accept the
camelCase keys used by manifests and command output.
"""

from __future__ import annotations

import json
import re
import shlex
import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ExtensionError, MissingValueError, ResponseError, TemplateError

INPUT_TYPES = ("textfield", "textarea", "password", "checkbox", "dropdown")
PAGE_TYPES = ("list", "detail")
ON_SUCCESS_POLICIES = ("push-page", "reload-page", "copy-text", "open-url", "open-path", "exit")

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][\w-]*)\s*\}\}")


def _require_mapping(raw: object, what: str, error: type[Exception] = ExtensionError) -> Mapping[str, object]:
    if not isinstance(raw, Mapping):
        raise error(f"{what} must be an object, got {type(raw).__name__}")
    return raw


def _optional_str(raw: Mapping[str, object], key: str, what: str, error: type[Exception] = ExtensionError) -> str:
    value = raw.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise error(f"{what}: {key!r} must be a string")
    return value


@dataclass(frozen=True)
class ScriptInput:
    """Typed parameter or preference declared by an extension."""

    name: str
    type: str = "textfield"
    title: str = ""
    placeholder: str = ""
    default: object = None
    optional: bool = False
    data: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return self.title or self.name

    @classmethod
    def from_dict(cls, raw: object) -> ScriptInput:
        data = _require_mapping(raw, "input")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ExtensionError("input is missing a name")
        input_type = data.get("type", "textfield")
        if input_type not in INPUT_TYPES:
            raise ExtensionError(f"input {name}: unknown type {input_type!r}")
        options = data.get("data", ())
        if isinstance(options, Mapping):
            options = options.get("options", ())
        if not isinstance(options, (list, tuple)):
            raise ExtensionError(f"input {name}: 'data' must be a list of options")
        default = data.get("default")
        if input_type == "checkbox" and default is not None and not isinstance(default, bool):
            raise ExtensionError(f"input {name}: checkbox default must be a boolean")
        return cls(
            name=name,
            type=input_type,
            title=_optional_str(data, "title", f"input {name}"),
            placeholder=_optional_str(data, "placeholder", f"input {name}"),
            default=default,
            optional=bool(data.get("optional", False)),
            data=tuple(str(option) for option in options),
        )


@dataclass
class ScriptInputWithValue:
    """An input merged with the value resolved for one invocation.

    ``default`` carries a call-site default that overrides the declared one.
    """

    input: ScriptInput | None = None
    value: object = None
    default: object = None

    def effective_default(self) -> object:
        if self.default is not None:
            return self.default
        if self.input is not None:
            return self.input.default
        return None

    def get_value(self) -> object:
        if self.value is not None:
            return self.value
        default = self.effective_default()
        if default is not None:
            return default
        if self.input is not None and self.input.optional:
            return None
        name = self.input.name if self.input is not None else "input"
        raise MissingValueError(f"missing value for {name}")

    @property
    def is_resolved(self) -> bool:
        if self.value is not None or self.effective_default() is not None:
            return True
        return self.input is not None and self.input.optional


def parse_with(raw: object) -> dict[str, ScriptInputWithValue]:
    """Decode a ``with`` mapping of parameter overrides.

    Scalars are explicit values; objects may carry ``value`` or ``default``.
    """
    if raw is None:
        return {}
    data = _require_mapping(raw, "'with'", ResponseError)
    out: dict[str, ScriptInputWithValue] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            out[key] = ScriptInputWithValue(value=value.get("value"), default=value.get("default"))
        else:
            out[key] = ScriptInputWithValue(value=value)
    return out


@dataclass(frozen=True)
class Requirement:
    """External tool an extension needs on ``PATH``."""

    which: str
    home_page: str = ""

    def check(self) -> bool:
        return shutil.which(self.which) is not None

    @classmethod
    def from_dict(cls, raw: object) -> Requirement:
        data = _require_mapping(raw, "requirement")
        which = data.get("which")
        if not isinstance(which, str) or not which:
            raise ExtensionError("requirement is missing 'which'")
        return cls(which=which, home_page=_optional_str(data, "homePage", f"requirement {which}"))


@dataclass(frozen=True)
class PageSpec:
    type: str = ""
    is_generator: bool = False
    show_preview: bool = False

    @classmethod
    def from_dict(cls, raw: object) -> PageSpec:
        if raw is None:
            return cls()
        if isinstance(raw, str):
            raw = {"type": raw}
        data = _require_mapping(raw, "page")
        page_type = data.get("type", "")
        if page_type and page_type not in PAGE_TYPES:
            raise ExtensionError(f"unknown page type: {page_type}")
        return cls(
            type=page_type or "",
            is_generator=bool(data.get("isGenerator", False)),
            show_preview=bool(data.get("showPreview", False)),
        )


def _template_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "''"
    return shlex.quote(str(value))


@dataclass(frozen=True)
class Command:
    """One externally executed capability of an extension."""

    name: str
    command: str
    title: str = ""
    inputs: tuple[ScriptInput, ...] = ()
    preferences: tuple[ScriptInput, ...] = ()
    page: PageSpec = field(default_factory=PageSpec)
    on_success: str = ""
    root: Path | None = None

    def render(self, values: Mapping[str, object]) -> str:
        """Substitute ``{{ name }}`` placeholders with shell-quoted values."""

        def replace(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in values:
                raise TemplateError(f"command {self.name}: no value for {{{{ {key} }}}}")
            return _template_value(values[key])

        return _PLACEHOLDER_RE.sub(replace, self.command)

    @classmethod
    def from_dict(cls, name: str, raw: object) -> Command:
        data = _require_mapping(raw, f"command {name}")
        command = data.get("command")
        if not isinstance(command, str) or not command.strip():
            raise ExtensionError(f"command {name}: 'command' must be a non-empty string")
        page = PageSpec.from_dict(data.get("page", data.get("mode")))
        on_success = data.get("onSuccess")
        if on_success is None:
            on_success = "push-page" if page.type else ""
        if on_success and on_success not in ON_SUCCESS_POLICIES:
            raise ExtensionError(f"command {name}: unknown onSuccess policy {on_success!r}")
        return cls(
            name=name,
            command=command,
            title=_optional_str(data, "title", f"command {name}") or name,
            inputs=tuple(ScriptInput.from_dict(item) for item in data.get("inputs", ()) or ()),
            preferences=tuple(ScriptInput.from_dict(item) for item in data.get("preferences", ()) or ()),
            page=page,
            on_success=on_success,
        )


@dataclass(frozen=True)
class RootItem:
    """Top-level launcher shortcut to a command with fixed parameters."""

    extension: str
    script: str
    title: str = ""
    subtitle: str = ""
    with_: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: object, extension: str = "") -> RootItem:
        data = _require_mapping(raw, "root item")
        script = data.get("script")
        if not isinstance(script, str) or not script:
            raise ExtensionError("root item is missing 'script'")
        extension_name = _optional_str(data, "extension", "root item") or extension
        if not extension_name:
            raise ExtensionError(f"root item {script}: missing 'extension'")
        with_ = data.get("with") or {}
        _require_mapping(with_, f"root item {script}: 'with'")
        return cls(
            extension=extension_name,
            script=script,
            title=_optional_str(data, "title", "root item") or script,
            subtitle=_optional_str(data, "subtitle", "root item"),
            with_=dict(with_),
        )


@dataclass(frozen=True)
class Extension:
    """Named, rooted collection of commands, preferences, and requirements."""

    name: str
    root: Path
    title: str = ""
    commands: Mapping[str, Command] = field(default_factory=dict)
    preferences: tuple[ScriptInput, ...] = ()
    requirements: tuple[Requirement, ...] = ()
    root_items: tuple[RootItem, ...] = ()


@dataclass(frozen=True)
class ScriptAction:
    """Tagged action descriptor emitted in command output."""

    type: str
    title: str = ""
    shortcut: str = ""
    text: str = ""
    url: str = ""
    path: str = ""
    script: str = ""
    extension: str = ""
    dir: str = ""
    with_: Mapping[str, ScriptInputWithValue] = field(default_factory=dict)
    on_success: str = ""
    args: tuple[str, ...] = ()
    method: str = "args"

    @classmethod
    def from_dict(cls, raw: object) -> ScriptAction:
        data = _require_mapping(raw, "action", ResponseError)
        action_type = data.get("type")
        if not isinstance(action_type, str):
            raise ResponseError("action is missing 'type'")
        args = data.get("args", ())
        if not isinstance(args, (list, tuple)):
            raise ResponseError(f"{action_type} action: 'args' must be a list")
        return cls(
            type=action_type,
            title=_optional_str(data, "title", f"{action_type} action", ResponseError),
            shortcut=_optional_str(data, "shortcut", f"{action_type} action", ResponseError),
            text=_optional_str(data, "text", f"{action_type} action", ResponseError),
            url=_optional_str(data, "url", f"{action_type} action", ResponseError),
            path=_optional_str(data, "path", f"{action_type} action", ResponseError),
            script=_optional_str(data, "script", f"{action_type} action", ResponseError),
            extension=_optional_str(data, "extension", f"{action_type} action", ResponseError),
            with_=parse_with(data.get("with")),
            on_success=_optional_str(data, "onSuccess", f"{action_type} action", ResponseError),
            args=tuple(str(arg) for arg in args),
            method=_optional_str(data, "method", f"{action_type} action", ResponseError) or "args",
        )


@dataclass(frozen=True)
class ScriptItem:
    id: str
    title: str
    subtitle: str = ""
    preview: str = ""
    language: str = ""
    accessories: tuple[str, ...] = ()
    actions: tuple[ScriptAction, ...] = ()

    @classmethod
    def from_dict(cls, raw: object) -> ScriptItem:
        data = _require_mapping(raw, "list item", ResponseError)
        item_id = data.get("id", "")
        accessories = data.get("accessories", ())
        if not isinstance(accessories, (list, tuple)):
            raise ResponseError("list item: 'accessories' must be a list")
        actions = data.get("actions", ())
        if not isinstance(actions, (list, tuple)):
            raise ResponseError("list item: 'actions' must be a list")
        return cls(
            id="" if item_id is None else str(item_id),
            title=_optional_str(data, "title", "list item", ResponseError),
            subtitle=_optional_str(data, "subtitle", "list item", ResponseError),
            preview=_optional_str(data, "preview", "list item", ResponseError),
            language=_optional_str(data, "language", "list item", ResponseError),
            accessories=tuple(str(accessory) for accessory in accessories),
            actions=tuple(ScriptAction.from_dict(action) for action in actions),
        )


@dataclass(frozen=True)
class Detail:
    content: str = ""
    language: str = ""
    actions: tuple[ScriptAction, ...] = ()

    @classmethod
    def from_dict(cls, raw: object) -> Detail:
        data = _require_mapping(raw, "detail", ResponseError)
        actions = data.get("actions", ())
        if not isinstance(actions, (list, tuple)):
            raise ResponseError("detail: 'actions' must be a list")
        return cls(
            content=_optional_str(data, "content", "detail", ResponseError),
            language=_optional_str(data, "language", "detail", ResponseError),
            actions=tuple(ScriptAction.from_dict(action) for action in actions),
        )


def _decode(text: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseError(str(exc)) from exc


def parse_list_items(text: str) -> list[ScriptItem]:
    """Decode list output into script items.

    Accepts a bare array, ``{"items": [...]}``, or the typed response envelope
    with items either at the top level or under ``"list"``.
    """
    data = _decode(text)
    if isinstance(data, Mapping):
        if isinstance(data.get("list"), Mapping):
            data = data["list"]
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ResponseError("list output must contain an 'items' array")
    return [ScriptItem.from_dict(item) for item in data]


def parse_detail(text: str) -> Detail:
    """Decode detail output, unwrapping the typed response envelope if present."""
    data = _decode(text)
    if isinstance(data, Mapping) and isinstance(data.get("detail"), Mapping):
        data = data["detail"]
    return Detail.from_dict(data)
