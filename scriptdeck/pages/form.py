"""Auto-generated forms for missing parameters and preferences."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..extensions.types import ScriptInput
from ..runtime.actions import KeyBinding
from ..runtime.messages import Cmd, KeyMsg, SubmitMsg, pop_cmd
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import footer_line, frame, separator, spinner_frame
from .textinput import TextInput

# Separator and footer.
CHROME_ROWS = 2
ROWS_PER_ITEM = 3
_SUBMIT_BINDING = KeyBinding(keys=("ctrl+s",), help_key="⌃s", help="Submit")


class FormItem:
    """One input widget: text, masked text, textarea, checkbox, or dropdown."""

    def __init__(self, script_input: ScriptInput, value: object = None) -> None:
        self.input = script_input
        self.error = ""
        self.focused = False
        initial = script_input.default if value is None else value
        self.checked = bool(initial) if script_input.type == "checkbox" else False
        self.options = script_input.data
        self.index = 0
        if script_input.type == "dropdown" and initial is not None and str(initial) in self.options:
            self.index = self.options.index(str(initial))
        self.text = TextInput(
            placeholder=script_input.placeholder,
            masked=script_input.type == "password",
            multiline=script_input.type == "textarea",
        )
        if script_input.type not in ("checkbox", "dropdown") and initial is not None:
            self.text.set_value(str(initial))

    @property
    def name(self) -> str:
        return self.input.name

    def value(self) -> object:
        if self.input.type == "checkbox":
            return self.checked
        if self.input.type == "dropdown":
            return self.options[self.index] if self.options else ""
        return self.text.value

    def is_empty(self) -> bool:
        if self.input.type == "checkbox":
            return False
        return self.value() == ""

    def focus(self) -> None:
        self.focused = True
        self.text.focus()

    def blur(self) -> None:
        self.focused = False
        self.text.blur()

    def update(self, key: str) -> bool:
        if self.input.type == "checkbox":
            if key in (" ", "x"):
                self.checked = not self.checked
                self.error = ""
                return True
            return False
        if self.input.type == "dropdown":
            if not self.options:
                return False
            if key in ("right", "l", " "):
                self.index = (self.index + 1) % len(self.options)
                return True
            if key in ("left", "h"):
                self.index = (self.index - 1) % len(self.options)
                return True
            return False
        changed = self.text.update(key)
        if changed:
            self.error = ""
        return changed

    def view(self, theme: UITheme = DEFAULT_THEME) -> list[str]:
        marker = f"{theme.selected_marker}│{theme.reset}" if self.focused else " "
        label = f"{theme.field_label}{self.input.label}{theme.reset}"
        if self.error:
            label += f"  {theme.field_error}{self.error}{theme.reset}"
        if self.input.type == "checkbox":
            box = "[x]" if self.checked else "[ ]"
            widget = f"{theme.reverse}{box}{theme.reset}" if self.focused else box
        elif self.input.type == "dropdown":
            current = self.options[self.index] if self.options else ""
            widget = f"‹ {theme.query}{current}{theme.reset} ›"
        else:
            widget = self.text.view(theme)
        return [f" {marker} {label}", f" {marker} {widget}", ""]


def new_form_item(script_input: ScriptInput, value: object = None) -> FormItem:
    return FormItem(script_input, value)


class Form:
    """Form page; submitting emits ``SubmitMsg(name, values)``."""

    def __init__(self, name: str, title: str, items: Sequence[FormItem], *, theme: UITheme = DEFAULT_THEME) -> None:
        self.name = name
        self.title = title
        self.items = list(items)
        self.theme = theme
        self.focus_index = 0
        self.is_loading = False
        self.offset = 0
        self.width = 0
        self.height = 0
        if self.items:
            self.items[0].focus()

    def init(self) -> Cmd | None:
        return None

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._scroll_to_focus()

    def set_is_loading(self, loading: bool) -> Cmd | None:
        self.is_loading = loading
        return None

    def values(self) -> dict[str, object]:
        return {item.name: item.value() for item in self.items}

    def _move_focus(self, delta: int) -> None:
        if not self.items:
            return
        self.items[self.focus_index].blur()
        self.focus_index = (self.focus_index + delta) % len(self.items)
        self.items[self.focus_index].focus()
        self._scroll_to_focus()

    def _scroll_to_focus(self) -> None:
        visible_items = max(1, (self.height - CHROME_ROWS) // ROWS_PER_ITEM)
        if self.focus_index < self.offset:
            self.offset = self.focus_index
        elif self.focus_index >= self.offset + visible_items:
            self.offset = self.focus_index - visible_items + 1

    def submit(self) -> Cmd | None:
        """Validate required fields and return the submit command."""
        for index, item in enumerate(self.items):
            if not item.input.optional and item.is_empty():
                item.error = "required"
                self._move_focus(index - self.focus_index)
                return None
        name = self.name
        values = self.values()
        return lambda: SubmitMsg(name, values)

    def update(self, msg: Any) -> tuple[Form, Cmd | None]:
        if not isinstance(msg, KeyMsg):
            return self, None
        key = msg.key
        if self.is_loading:
            return self, pop_cmd if key == "esc" else None
        if key == "esc":
            return self, pop_cmd
        if key == "ctrl+s":
            return self, self.submit()
        if key in ("tab", "down"):
            self._move_focus(1)
            return self, None
        if key in ("shift+tab", "up"):
            self._move_focus(-1)
            return self, None
        current = self.items[self.focus_index] if self.items else None
        if key == "enter" and (current is None or current.input.type != "textarea"):
            if current is None or self.focus_index == len(self.items) - 1:
                return self, self.submit()
            self._move_focus(1)
            return self, None
        if current is not None:
            current.update(key)
        return self, None

    def view(self) -> str:
        theme = self.theme
        body: list[str] = []
        for item in self.items[self.offset :]:
            body.extend(item.view(theme))
        rows = max(1, self.height - CHROME_ROWS)
        body = body[:rows]
        body.extend([""] * (rows - len(body)))
        title = self.title
        if self.is_loading:
            title = f"{theme.spinner}{spinner_frame()}{theme.reset} {title}"
        lines = [*body, separator(self.width, theme), footer_line(self.width, title, [_SUBMIT_BINDING], theme)]
        return frame(lines, self.width, self.height)
