"""Measuring and shaping text that may carry ANSI styling.

Extension output and highlighted previews mix SGR escapes with wide
characters and tabs. Everything here walks a line as a stream of tokens:
escape sequences pass through untouched and take no columns, while visible
characters are measured as the terminal would draw them.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Columns ``ch`` occupies when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _tokens(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(token, is_escape)`` pairs; visible text comes one char at a time."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        yield from ((ch, False) for ch in text[pos : match.start()])
        yield match.group(0), True
        pos = match.end()
    yield from ((ch, False) for ch in text[pos:])


def display_width(text: str) -> int:
    col = 0
    for token, is_escape in _tokens(text):
        if not is_escape:
            col += char_display_width(token, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` columns, expanding tabs to spaces.

    Escapes up to the cut are kept so styling stays balanced with what is
    shown.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for token, is_escape in _tokens(text):
        if is_escape:
            out.append(token)
            continue
        width = char_display_width(token, col)
        if col + width > max_cols:
            break
        out.append(" " * width if token == "\t" else token)
        col += width
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Break one line into chunks of at most ``width`` columns.

    A character that does not fit starts a new chunk; a chunk always holds at
    least one visible character so over-wide glyphs cannot stall wrapping.
    """
    if width <= 0:
        return [""]
    chunks: list[str] = []
    current: list[str] = []
    col = 0
    for token, is_escape in _tokens(text):
        if is_escape:
            current.append(token)
            continue
        cells = char_display_width(token, col)
        if col > 0 and col + cells > width:
            chunks.append("".join(current))
            current = []
            col = 0
            cells = char_display_width(token, col)
        current.append(" " * cells if token == "\t" else token)
        col += cells
    chunks.append("".join(current))
    return chunks


def wrap_text(text: str, width: int) -> list[str]:
    """Split ``text`` into lines and wrap each one to ``width`` columns."""
    lines: list[str] = []
    for line in text.splitlines() or [""]:
        lines.extend(wrap_ansi_line(line, width))
    return lines
