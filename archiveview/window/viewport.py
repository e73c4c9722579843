"""Vertical block windowing for large text payloads.

``WindowRenderer`` partitions text into blocks, keeps a per-block height
model (measured where a probe ran, estimated otherwise), and answers which
blocks intersect the scroll viewport. Only those blocks plus a small overscan
margin are ever materialized. Nothing here performs I/O; every call is cheap
enough to run on each scroll tick.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Callable
from dataclasses import dataclass
from itertools import accumulate

from .blocks import Block, build_blocks

logger = logging.getLogger(__name__)

DEFAULT_LINE_HEIGHT = 1
DEFAULT_OVERSCAN = 2


@dataclass(frozen=True)
class Viewport:
    """Visible scroll range ``[scroll_top, scroll_top + height)``."""

    scroll_top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.scroll_top + self.height


@dataclass(frozen=True)
class VirtualItem:
    """One materialized block positioned inside the scroll container."""

    index: int
    start: float
    size: float

    @property
    def end(self) -> float:
        return self.start + self.size


class WindowRenderer:
    """Layout model for windowed rendering of one text payload.

    ``measure`` is the optional off-screen probe: given a block's text it
    returns the block's real height. Without it every height is the estimate
    ``line_count * line_height``.
    """

    def __init__(
        self,
        line_height: float = DEFAULT_LINE_HEIGHT,
        overscan: int = DEFAULT_OVERSCAN,
        measure: Callable[[str], float] | None = None,
        lines_per_block: int | None = None,
    ) -> None:
        if line_height <= 0:
            raise ValueError("line_height must be > 0")
        if overscan < 0:
            raise ValueError("overscan must be >= 0")
        self.line_height = line_height
        self.overscan = overscan
        self.measure = measure
        self.lines_per_block = lines_per_block
        self.scroll_top: float = 0
        self._text: str | None = None
        self._blocks: list[Block] = []
        self._measured: dict[int, float] = {}
        self._starts: list[float] | None = None
        self._ends: list[float] | None = None

    @property
    def text(self) -> str:
        return self._text or ""

    @property
    def blocks(self) -> list[Block]:
        return self._blocks

    @property
    def is_empty(self) -> bool:
        return not self._text

    def set_text(self, text: str) -> bool:
        """Load a new payload; returns ``False`` when the text is unchanged.

        Block boundaries no longer match old indices, so the measurement cache
        is dropped and the view scrolls back to the top.
        """
        if text == self._text:
            return False
        self._text = text
        self._blocks = build_blocks(text, self.lines_per_block)
        self._measured.clear()
        self._invalidate_offsets()
        self.scroll_top = 0
        logger.debug("windowing %d blocks", len(self._blocks))
        return True

    def clear(self) -> None:
        self.set_text("")

    def _invalidate_offsets(self) -> None:
        self._starts = None
        self._ends = None

    def estimated_height(self, index: int) -> float:
        return self._blocks[index].line_count * self.line_height

    def block_height(self, index: int) -> float:
        """Best-known height: measured when available, estimated otherwise."""
        measured = self._measured.get(index)
        if measured is not None:
            return measured
        return self.estimated_height(index)

    def is_measured(self, index: int) -> bool:
        return index in self._measured

    def measure_block(self, index: int) -> float:
        """Probe one block once and cache its height."""
        cached = self._measured.get(index)
        if cached is not None:
            return cached
        if self.measure is None:
            return self.estimated_height(index)
        height = max(0.0, float(self.measure(self._blocks[index].text)))
        self._measured[index] = height
        self._invalidate_offsets()
        return height

    def _offsets(self) -> tuple[list[float], list[float]]:
        if self._starts is None or self._ends is None:
            ends = list(accumulate(self.block_height(idx) for idx in range(len(self._blocks))))
            self._starts = [0.0, *ends[:-1]] if ends else []
            self._ends = ends
        return self._starts, self._ends

    def total_height(self) -> float:
        """Sum of every block's current best-known height."""
        if self.is_empty:
            return 0
        _starts, ends = self._offsets()
        return ends[-1] if ends else 0

    def block_start(self, index: int) -> float:
        starts, _ends = self._offsets()
        return starts[index]

    def max_scroll(self, viewport_height: float) -> float:
        return max(0, self.total_height() - viewport_height)

    def scroll_to(self, offset: float, viewport_height: float) -> float:
        """Clamp and store the scroll offset; returns the applied value."""
        self.scroll_top = max(0, min(offset, self.max_scroll(viewport_height)))
        return self.scroll_top

    def visible_indices(self, viewport: Viewport) -> range:
        """Block indices intersecting ``viewport`` widened by the overscan."""
        if self.is_empty or not self._blocks:
            return range(0)
        starts, ends = self._offsets()
        count = len(self._blocks)
        first = min(bisect_right(ends, viewport.scroll_top), count - 1)
        last = bisect_left(starts, viewport.bottom) - 1
        last = max(first, min(last, count - 1))
        return range(max(0, first - self.overscan), min(count, last + self.overscan + 1))

    def materialize(self, viewport: Viewport | None = None, viewport_height: float | None = None) -> list[VirtualItem]:
        """Return positioned items for the blocks that must be rendered.

        Unmeasured blocks in range are probed first. Measuring can change the
        layout, so the range is recomputed until every block in it is measured.
        """
        if viewport is None:
            viewport = Viewport(self.scroll_top, viewport_height if viewport_height is not None else 0)
        indices = self.visible_indices(viewport)
        if self.measure is not None:
            while True:
                pending = [idx for idx in indices if idx not in self._measured]
                if not pending:
                    break
                for idx in pending:
                    self.measure_block(idx)
                indices = self.visible_indices(viewport)
        starts, _ends = self._offsets()
        return [VirtualItem(index=idx, start=starts[idx], size=self.block_height(idx)) for idx in indices]


__all__ = [
    "DEFAULT_LINE_HEIGHT",
    "DEFAULT_OVERSCAN",
    "Viewport",
    "VirtualItem",
    "WindowRenderer",
]
