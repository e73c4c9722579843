"""Line-block partitioning of text payloads for windowed rendering."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

SMALL_CONTENT_MAX_LINES = 50
DEFAULT_LINES_PER_BLOCK = 100


@dataclass(frozen=True)
class Block:
    """A contiguous run of lines, identified by its position in the partition."""

    index: int
    text: str
    first_line: int
    line_count: int


def split_lines(text: str) -> list[str]:
    """Split on ``\\n``; a trailing newline yields a final empty line."""
    return text.split("\n")


def choose_lines_per_block(line_count: int) -> int:
    """Short payloads render line-by-line; larger ones in groups of 100."""
    if line_count <= SMALL_CONTENT_MAX_LINES:
        return 1
    return DEFAULT_LINES_PER_BLOCK


def partition(text: str, lines_per_block: int) -> list[str]:
    """Split ``text`` into consecutive groups of ``lines_per_block`` lines.

    The last group may be shorter. Empty text yields a single empty block.
    Joining the result with ``\\n`` reconstructs ``text`` exactly.
    """
    if lines_per_block < 1:
        raise ValueError("lines_per_block must be >= 1")
    lines = split_lines(text)
    return ["\n".join(lines[start : start + lines_per_block]) for start in range(0, len(lines), lines_per_block)]


def join_blocks(blocks: Sequence[str]) -> str:
    return "\n".join(blocks)


def build_blocks(text: str, lines_per_block: int | None = None) -> list[Block]:
    """Partition ``text`` into ``Block`` records, choosing the size when omitted."""
    lines = split_lines(text)
    size = lines_per_block if lines_per_block is not None else choose_lines_per_block(len(lines))
    if size < 1:
        raise ValueError("lines_per_block must be >= 1")
    blocks: list[Block] = []
    for index, start in enumerate(range(0, len(lines), size)):
        chunk = lines[start : start + size]
        blocks.append(Block(index=index, text="\n".join(chunk), first_line=start, line_count=len(chunk)))
    return blocks


__all__ = [
    "SMALL_CONTENT_MAX_LINES",
    "DEFAULT_LINES_PER_BLOCK",
    "Block",
    "split_lines",
    "choose_lines_per_block",
    "partition",
    "join_blocks",
    "build_blocks",
]
