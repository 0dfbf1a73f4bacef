"""Single-line text input used by list headers, the action palette, and forms."""

from __future__ import annotations

from ..ui_theme import DEFAULT_THEME, UITheme


def is_text_key(key: str) -> bool:
    """Printable single characters are typed; named keys are not."""
    return len(key) == 1 and key.isprintable()


class TextInput:
    def __init__(self, placeholder: str = "", *, masked: bool = False, multiline: bool = False) -> None:
        self.placeholder = placeholder
        self.masked = masked
        self.multiline = multiline
        self.value = ""
        self.focused = False

    def set_value(self, value: str) -> None:
        self.value = value

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def update(self, key: str) -> bool:
        """Apply one key; return whether the value changed."""
        if not self.focused:
            return False
        previous = self.value
        if is_text_key(key):
            self.value += key
        elif key == "backspace":
            self.value = self.value[:-1]
        elif key == "ctrl+u":
            self.value = ""
        elif key == "enter" and self.multiline:
            self.value += "\n"
        return self.value != previous

    def view(self, theme: UITheme = DEFAULT_THEME) -> str:
        cursor = f"{theme.reverse} {theme.reset}" if self.focused else ""
        if not self.value:
            return f"{cursor}{theme.placeholder}{self.placeholder}{theme.reset}"
        shown = "•" * len(self.value) if self.masked else self.value
        shown = shown.replace("\n", "⏎")
        return f"{theme.query}{shown}{theme.reset}{cursor}"
