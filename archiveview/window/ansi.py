"""ANSI-aware width measurement, clipping, and wrapping for terminal output.

Escape sequences never count toward width; tabs expand to 8-column stops and
East Asian wide characters take two columns.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def _tokens(text: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(token, is_escape)``: whole escape sequences or single characters."""
    pos = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        for ch in text[pos : match.start()]:
            yield ch, False
        yield match.group(0), True
        pos = match.end()
    for ch in text[pos:]:
        yield ch, False


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim; tabs are expanded into spaces.
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


def wrap_ansi_line(text: str, width: int) -> list[str]:
    """Split a styled line into screen rows of at most ``width`` columns.

    An empty line still occupies one row. A tab that would cross the edge
    starts the next row.
    """
    if width <= 0:
        return [""]
    rows: list[str] = []
    current: list[str] = []
    col = 0
    for token, is_escape in _tokens(text):
        if is_escape:
            current.append(token)
            continue
        cells = char_display_width(token, col)
        if col > 0 and col + cells > width:
            rows.append("".join(current))
            current = []
            col = 0
            cells = char_display_width(token, col)
        current.append(" " * min(cells, width) if token == "\t" else token)
        col += cells
    rows.append("".join(current))
    return rows


__all__ = [
    "ANSI_ESCAPE_RE",
    "char_display_width",
    "clip_ansi_line",
    "wrap_ansi_line",
]
