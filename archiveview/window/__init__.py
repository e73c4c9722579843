"""Windowed rendering of large text payloads.

Partitions text into line blocks, tracks measured/estimated block heights,
and computes which blocks intersect the current viewport.
"""

from __future__ import annotations

from .blocks import (
    DEFAULT_LINES_PER_BLOCK,
    SMALL_CONTENT_MAX_LINES,
    Block,
    build_blocks,
    choose_lines_per_block,
    join_blocks,
    partition,
    split_lines,
)
from .classify import BINARY_SNIFF_BYTES, is_binary
from .measure import terminal_row_probe, wrapped_row_count
from .text import decode_text, sanitize_terminal_text
from .viewport import DEFAULT_LINE_HEIGHT, DEFAULT_OVERSCAN, Viewport, VirtualItem, WindowRenderer

__all__ = [
    "DEFAULT_LINES_PER_BLOCK",
    "SMALL_CONTENT_MAX_LINES",
    "Block",
    "build_blocks",
    "choose_lines_per_block",
    "join_blocks",
    "partition",
    "split_lines",
    "BINARY_SNIFF_BYTES",
    "is_binary",
    "terminal_row_probe",
    "wrapped_row_count",
    "decode_text",
    "sanitize_terminal_text",
    "DEFAULT_LINE_HEIGHT",
    "DEFAULT_OVERSCAN",
    "Viewport",
    "VirtualItem",
    "WindowRenderer",
]
