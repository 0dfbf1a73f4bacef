"""Sanitization and syntax highlighting for extension-provided text.

Extension output is untrusted: terminal control bytes are neutralized before
anything reaches the screen. Text that declares a language is highlighted
with Pygments.
"""

from __future__ import annotations

import re

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, TerminalFormatter] = {}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_text(text: str, language: str = "", style: str = DEFAULT_STYLE) -> str:
    """Return sanitized ``text``, colorized when ``language`` names a lexer."""
    text = sanitize_terminal_text(text)
    if not language:
        return text
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        return text
    rendered = pygments_highlight(text, lexer, _formatter_for_style(style))
    if not text.endswith("\n"):
        rendered = rendered.rstrip("\n")
    return rendered
