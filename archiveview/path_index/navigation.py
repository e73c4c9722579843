"""Visibility projection and focus/selection helpers over a built tree."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..ingest.types import Entry
from .types import NavigationState, TreeNode, TreeRow


def visible_leaves(tree: Sequence[TreeNode], expanded_dirs: set[str] | frozenset[str]) -> list[Entry]:
    """Return file entries reachable through expanded directories, in tree order."""
    leaves: list[Entry] = []

    def walk(nodes: Sequence[TreeNode]) -> None:
        for node in nodes:
            if node.is_directory:
                if node.path in expanded_dirs:
                    walk(node.children)
            elif node.entry is not None:
                leaves.append(node.entry)

    walk(tree)
    return leaves


def visible_rows(tree: Sequence[TreeNode], expanded_dirs: set[str] | frozenset[str]) -> list[TreeRow]:
    """Return every drawable row (directories and files) honoring expansion."""
    rows: list[TreeRow] = []

    def walk(nodes: Sequence[TreeNode], depth: int) -> None:
        for node in nodes:
            rows.append(TreeRow(node, depth))
            if node.is_directory and node.path in expanded_dirs:
                walk(node.children, depth + 1)

    walk(tree, 0)
    return rows


def directory_paths(tree: Sequence[TreeNode]) -> set[str]:
    """Return the path of every directory node in the tree."""
    out: set[str] = set()
    stack = list(tree)
    while stack:
        node = stack.pop()
        if node.is_directory:
            out.add(node.path)
            stack.extend(node.children)
    return out


def directories_named(tree: Sequence[TreeNode], names: Iterable[str]) -> set[str]:
    """Return paths of directories whose last segment is one of ``names``."""
    wanted = set(names)
    if not wanted:
        return set()
    out: set[str] = set()
    stack = list(tree)
    while stack:
        node = stack.pop()
        if not node.is_directory:
            continue
        if node.name in wanted:
            out.add(node.path)
        stack.extend(node.children)
    return out


def find_node(tree: Sequence[TreeNode], path: str) -> TreeNode | None:
    """Walk segment by segment to the node at ``path``."""
    nodes = tree
    current: TreeNode | None = None
    prefix = ""
    for part in [segment for segment in path.split("/") if segment]:
        prefix = f"{prefix}/{part}" if prefix else part
        current = next((node for node in nodes if node.path == prefix), None)
        if current is None:
            return None
        nodes = current.children
    return current


def clamp_focus(state: NavigationState, visible_count: int) -> None:
    """Keep ``focused_index`` inside ``[0, visible_count)`` or ``None`` when empty."""
    if visible_count <= 0:
        state.focused_index = None
        return
    if state.focused_index is None:
        return
    state.focused_index = max(0, min(state.focused_index, visible_count - 1))


def move_focus(state: NavigationState, visible_count: int, delta: int) -> int | None:
    """Move focus by ``delta`` rows (keyboard Up/Down), clamped to bounds.

    With no current focus, moving down focuses the first leaf and moving up
    focuses the last one.
    """
    if visible_count <= 0:
        state.focused_index = None
        return None
    if state.focused_index is None:
        if delta == 0:
            return None
        state.focused_index = 0 if delta > 0 else visible_count - 1
        return state.focused_index
    state.focused_index = max(0, min(state.focused_index + delta, visible_count - 1))
    return state.focused_index


def focused_entry(state: NavigationState, leaves: Sequence[Entry]) -> Entry | None:
    if state.focused_index is None or not (0 <= state.focused_index < len(leaves)):
        return None
    return leaves[state.focused_index]


def select_path(state: NavigationState, leaves: Sequence[Entry], path: str) -> None:
    """Select ``path`` and move focus onto it when it is currently visible."""
    state.selected_path = path
    for idx, entry in enumerate(leaves):
        if entry.path == path:
            state.focused_index = idx
            return


def set_expanded(state: NavigationState, path: str, expanded: bool) -> None:
    if expanded:
        state.expanded_dirs.add(path)
    else:
        state.expanded_dirs.discard(path)


def toggle_directory(state: NavigationState, path: str) -> bool:
    """Flip one directory's expansion; returns the new expanded flag."""
    expanded = path not in state.expanded_dirs
    set_expanded(state, path, expanded)
    return expanded


__all__ = [
    "visible_leaves",
    "visible_rows",
    "directory_paths",
    "directories_named",
    "find_node",
    "clamp_focus",
    "move_focus",
    "focused_entry",
    "select_path",
    "set_expanded",
    "toggle_directory",
]
