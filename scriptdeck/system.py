"""Local side effects: clipboard writes and opening URLs."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
import webbrowser


def clipboard_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> None:
    """Copy ``text`` with the first available clipboard tool.

    Raises ``OSError`` when no tool is installed or every tool fails.
    """
    failures: list[str] = []
    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        proc = subprocess.run(command, input=text, text=True, capture_output=True, check=False)
        if proc.returncode == 0:
            return
        failures.append(f"{command[0]} exited with {proc.returncode}: {proc.stderr.strip()}")
    if not failures:
        raise OSError("no clipboard tool found (install wl-copy, xclip, or xsel)")
    raise OSError("could not copy to clipboard: " + "; ".join(failures))


def open_url(url: str) -> None:
    """Open ``url`` in the default browser or file handler."""
    if not webbrowser.open(url):
        raise OSError(f"could not open {url}")
