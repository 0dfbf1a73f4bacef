"""Shared page chrome: separators, footer bindings, spinner, and framing."""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence

from ..ansi import clip_ansi_line, display_width
from ..runtime.actions import KeyBinding
from ..ui_theme import DEFAULT_THEME, UITheme

SPINNER_FRAMES = ("|", "/", "-", "\\")
SPINNER_FRAME_SECONDS = 0.12


def spinner_frame(now: float | None = None) -> str:
    current = time.monotonic() if now is None else now
    return SPINNER_FRAMES[int(current / SPINNER_FRAME_SECONDS) % len(SPINNER_FRAMES)]


def separator(width: int, theme: UITheme = DEFAULT_THEME) -> str:
    return f"{theme.divider}{'─' * max(0, width)}{theme.reset}"


def footer_line(
    width: int,
    title: str,
    bindings: Sequence[KeyBinding] = (),
    theme: UITheme = DEFAULT_THEME,
) -> str:
    """Title on the left, key hints right-aligned."""
    left = f" {theme.bold}{title}{theme.reset}"
    hints = "  ".join(
        f"{theme.help_key}{binding.help_key}{theme.reset} {theme.help_dim}{binding.help}{theme.reset}"
        for binding in bindings
        if binding.help_key
    )
    gap = width - display_width(left) - display_width(hints) - 1
    if not hints or gap < 1:
        return clip_ansi_line(left, width)
    return f"{left}{' ' * gap}{hints} "


def loading_line(width: int, label: str = "Loading...", theme: UITheme = DEFAULT_THEME) -> str:
    return clip_ansi_line(f"  {theme.spinner}{spinner_frame()}{theme.reset} {label}", width)


def frame(lines: Iterable[str], width: int, height: int) -> str:
    """Clip every line to ``width`` and pad or cut the block to ``height`` rows."""
    out: list[str] = []
    for line in lines:
        clipped = clip_ansi_line(line, width)
        if "\x1b" in clipped:
            clipped += "\033[0m"
        out.append(clipped)
    if height > 0:
        out = out[:height]
        out.extend([""] * (height - len(out)))
    return "\n".join(out)
