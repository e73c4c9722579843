"""Hierarchical path index over a flat archive entry list.

Defines ``TreeNode`` and ``NavigationState`` plus the pure tree builder,
the visible-leaf projection used for keyboard traversal, and row formatting.
"""

from __future__ import annotations

from .build import build_tree, path_segments, sibling_sort_key
from .index import PathIndex
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
from .rendering import format_file_size, format_tree_row
from .types import NavigationState, TreeNode, TreeRow

__all__ = [
    "TreeNode",
    "NavigationState",
    "TreeRow",
    "PathIndex",
    "build_tree",
    "path_segments",
    "sibling_sort_key",
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
    "format_file_size",
    "format_tree_row",
]
