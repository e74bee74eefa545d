"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens
(``"UP"``, ``"CTRL_O"``, ``"ENTER"``, printable characters, ...).
"""

from __future__ import annotations

import codecs
import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x0f": "CTRL_O",
    b"\x12": "CTRL_R",
    b"\x13": "CTRL_S",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}
_CSI_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CSI_TILDE_KEYS = {
    "3": "DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_char(fd: int, first: bytes) -> str:
    """Complete a multi-byte UTF-8 character started by ``first``."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    text = decoder.decode(first)
    while not text:
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            return decoder.decode(b"", final=True)
        text = decoder.decode(nxt)
    return text


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; returns ``""`` when ``timeout_ms`` elapses."""
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

    control = _CONTROL_KEYS.get(ch)
    if control is not None:
        return control
    if ch != b"\x1b":
        return _read_utf8_char(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    named = _CSI_KEYS.get(seq)
    if named is not None:
        return named
    if seq.isdigit():
        digits = seq.decode("ascii")
        while True:
            part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part == b"~":
                return _CSI_TILDE_KEYS.get(digits, "ESC")
            if not part.isdigit() or len(digits) > 4:
                return "ESC"
            digits += part.decode("ascii")
    return "ESC"
