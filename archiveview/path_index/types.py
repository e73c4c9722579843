"""Tree datatypes for the archive path index."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ingest.types import Entry


@dataclass(frozen=True)
class TreeNode:
    """One directory or file in the derived archive tree.

    ``path`` is the full slash-joined path and doubles as the node key.
    Leaves carry a lookup-only reference to their ``Entry``; directories never do.
    """

    name: str
    path: str
    is_directory: bool
    children: tuple["TreeNode", ...] = ()
    entry: Entry | None = field(default=None, repr=False, compare=False)


@dataclass
class NavigationState:
    """Expand/collapse plus focus/selection state for one tree.

    ``focused_index`` indexes the derived visible-leaf sequence, not the tree.
    """

    expanded_dirs: set[str] = field(default_factory=set)
    focused_index: int | None = None
    selected_path: str | None = None


@dataclass(frozen=True)
class TreeRow:
    """One rendered tree-view row."""

    node: TreeNode
    depth: int


__all__ = [
    "TreeNode",
    "NavigationState",
    "TreeRow",
]
