"""Payload decoding and terminal-safe text sanitization."""

from __future__ import annotations

import re

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def decode_text(data: bytes) -> str:
    """Decode entry bytes as UTF-8 (dropping a leading BOM), else latin-1."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")
    return text[1:] if text.startswith("\ufeff") else text


def _escape_control(match: re.Match[str]) -> str:
    return f"\\x{ord(match.group(0)):02x}"


def sanitize_terminal_text(source: str) -> str:
    """Replace C0/C1 control characters and DEL with ``\\xNN`` escapes.

    Tab, newline, and carriage return are layout, not control, and pass through.
    """
    return _CONTROL_RE.sub(_escape_control, source)


__all__ = [
    "decode_text",
    "sanitize_terminal_text",
]
