"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key names such as
``ctrl+c``, ``enter``, ``shift+tab``, ``up`` or a single typed character.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\r": "enter",
    b"\t": "tab",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\x1b": "esc",
}

_CSI_FINAL_KEYS = {
    b"A": "up",
    b"B": "down",
    b"C": "right",
    b"D": "left",
    b"H": "home",
    b"F": "end",
    b"Z": "shift+tab",
}

_CSI_TILDE_KEYS = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pgup",
    "6": "pgdown",
    "7": "home",
    "8": "end",
}

_CSI_MODIFIERS = {"2": "shift", "3": "alt", "5": "ctrl", "9": "alt"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_char(fd: int, first: bytes) -> str:
    data = first
    for _ in range(_utf8_length(first[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _read_csi(fd: int) -> str:
    """Decode the rest of an ``ESC [`` sequence."""
    params = b""
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "esc"
        if 0x40 <= part[0] <= 0x7E:
            break
        params += part
        if len(params) > 16:
            return "esc"
    fields = params.decode("ascii", errors="replace").split(";")
    if part == b"~":
        key = _CSI_TILDE_KEYS.get(fields[0], "")
    else:
        key = _CSI_FINAL_KEYS.get(part, "")
    if not key:
        return "esc"
    if len(fields) == 2 and fields[1] in _CSI_MODIFIERS:
        return f"{_CSI_MODIFIERS[fields[1]]}+{key}"
    return key


def _read_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "esc"
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "alt+O"
        return _CSI_FINAL_KEYS.get(final, "esc")
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "esc"
    if seq == b"\r":
        return "alt+enter"
    if seq in (b"\x7f", b"\x08"):
        return "alt+backspace"
    if seq[0] < 0x20:
        _PENDING_BYTES.append(seq)
        return "esc"
    return f"alt+{_read_char(fd, seq)}"


def decode_control(ch: bytes) -> str:
    """Name a single control byte: ``\\x03`` is ``ctrl+c``."""
    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    code = ch[0]
    if code == 0:
        return "ctrl+space"
    if 1 <= code <= 26:
        return f"ctrl+{chr(code + 96)}"
    return f"ctrl+{chr(code + 64).lower()}"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key from ``fd``; returns ``""`` on timeout or EOF."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\x1b":
        return _read_escape(fd)
    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch[0] < 0x20:
        return decode_control(ch)
    return _read_char(fd, ch)
