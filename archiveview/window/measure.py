"""Block height probes.

A probe renders one block off-screen and reports its settled height. For
terminal output that is the number of screen rows the block wraps into.
"""

from __future__ import annotations

from collections.abc import Callable

from .ansi import wrap_ansi_line
from .text import sanitize_terminal_text


def wrapped_row_count(text: str, width: int) -> int:
    """Return screen rows ``text`` occupies when soft-wrapped at ``width``."""
    return sum(len(wrap_ansi_line(line, width)) for line in text.split("\n"))


def terminal_row_probe(width: int) -> Callable[[str], int]:
    """Build a height probe measuring wrapped rows at a fixed column width.

    Blocks are measured as printed: control bytes escaped first.
    """
    if width <= 0:
        raise ValueError("probe width must be >= 1")

    def probe(text: str) -> int:
        return wrapped_row_count(sanitize_terminal_text(text), width)

    return probe


__all__ = [
    "wrapped_row_count",
    "terminal_row_probe",
]
