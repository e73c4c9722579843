"""Stateful path index: one tree plus its navigation state."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..ingest.types import Entry
from .build import build_tree
from .navigation import (
    clamp_focus,
    directories_named,
    directory_paths,
    find_node,
    focused_entry,
    move_focus,
    select_path,
    set_expanded,
    toggle_directory,
    visible_leaves,
    visible_rows,
)
from .types import NavigationState, TreeNode, TreeRow


class PathIndex:
    """Navigable directory tree over the active entry list.

    The tree is rebuilt wholesale whenever the entries change. The visible-leaf
    sequence is a derived projection, cached until expansion or tree changes.
    """

    def __init__(self) -> None:
        self.tree: tuple[TreeNode, ...] = ()
        self.state = NavigationState()
        self._leaves_cache: tuple[frozenset[str], list[Entry]] | None = None

    def rebuild(self, entries: Iterable[Entry], auto_expand: Iterable[str] = ()) -> None:
        """Replace the tree and reset navigation state."""
        self.tree = build_tree(entries)
        self.state = NavigationState(expanded_dirs=directories_named(self.tree, auto_expand))
        self._leaves_cache = None

    def load(self, tree: tuple[TreeNode, ...], state: NavigationState) -> None:
        """Reinstate a previously built tree with its navigation state."""
        self.tree = tree
        self.state = state
        self._leaves_cache = None
        clamp_focus(self.state, len(self.visible_leaves))

    def clear(self) -> None:
        self.tree = ()
        self.state = NavigationState()
        self._leaves_cache = None

    @property
    def visible_leaves(self) -> list[Entry]:
        expanded = frozenset(self.state.expanded_dirs)
        cached = self._leaves_cache
        if cached is not None and cached[0] == expanded:
            return cached[1]
        leaves = visible_leaves(self.tree, expanded)
        self._leaves_cache = (expanded, leaves)
        return leaves

    def rows(self) -> list[TreeRow]:
        return visible_rows(self.tree, self.state.expanded_dirs)

    def _after_expansion_change(self) -> None:
        clamp_focus(self.state, len(self.visible_leaves))

    def toggle(self, path: str) -> bool:
        expanded = toggle_directory(self.state, path)
        self._after_expansion_change()
        return expanded

    def set_expanded(self, path: str, expanded: bool) -> None:
        set_expanded(self.state, path, expanded)
        self._after_expansion_change()

    def expand_all(self) -> None:
        self.state.expanded_dirs = directory_paths(self.tree)
        self._after_expansion_change()

    def collapse_all(self) -> None:
        self.state.expanded_dirs = set()
        self._after_expansion_change()

    def move_focus(self, delta: int) -> Entry | None:
        """Keyboard Up/Down over the visible leaves; returns the focused entry."""
        leaves = self.visible_leaves
        move_focus(self.state, len(leaves), delta)
        return focused_entry(self.state, leaves)

    def focused(self) -> Entry | None:
        return focused_entry(self.state, self.visible_leaves)

    def activate_focused(self) -> Entry | None:
        """Keyboard Enter: select the focused leaf."""
        entry = self.focused()
        if entry is not None:
            self.state.selected_path = entry.path
        return entry

    def select(self, path: str) -> None:
        select_path(self.state, self.visible_leaves, path)

    def find(self, path: str) -> TreeNode | None:
        return find_node(self.tree, path)

    def find_entry(self, path: str) -> Entry | None:
        node = self.find(path)
        if node is None or node.is_directory:
            return None
        return node.entry

    def leaf_count(self) -> int:
        return _count_leaves(self.tree)


def _count_leaves(nodes: Sequence[TreeNode]) -> int:
    return sum(_count_leaves(node.children) if node.is_directory else 1 for node in nodes)


__all__ = ["PathIndex"]
