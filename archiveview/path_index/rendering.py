"""Formatting helpers for tree-view rows."""

from __future__ import annotations

from .types import TreeRow

_RESET = "\033[0m"
_DIR_COLOR = "\033[1;34m"
_FILE_COLOR = "\033[0m"
_SIZE_COLOR = "\033[2;37m"
_MARKER_COLOR = "\033[2;36m"
_FOCUS = "\033[7m"
_SELECTED = "\033[1;4m"

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_file_size(size: int) -> str:
    """Format a byte count as ``B``/``KB``/``MB``/``GB``.

    Values below 10 keep one decimal, larger values are rounded.
    """
    if size <= 0:
        return "0 B"
    unit_idx = 0
    value = float(size)
    while value >= 1024 and unit_idx < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_idx += 1
    if value < 10:
        return f"{value:.1f} {_SIZE_UNITS[unit_idx]}"
    return f"{round(value)} {_SIZE_UNITS[unit_idx]}"


def format_tree_row(
    row: TreeRow,
    expanded: set[str] | frozenset[str],
    focused: bool = False,
    selected: bool = False,
    show_size_labels: bool = True,
    no_color: bool = False,
) -> str:
    """Render one tree row as display text, ANSI-styled unless ``no_color``."""
    node = row.node
    indent = "  " * row.depth

    def paint(code: str, text: str) -> str:
        return text if no_color else f"{code}{text}{_RESET}"

    if node.is_directory:
        marker = "▾ " if node.path in expanded else "▸ "
        return f"{indent}{paint(_MARKER_COLOR, marker)}{paint(_DIR_COLOR, node.name + '/')}"

    name = node.name
    if no_color:
        if focused:
            name = f"> {name}"
        if selected:
            name = f"{name} *"
    else:
        style = _FILE_COLOR
        if selected:
            style += _SELECTED
        if focused:
            style += _FOCUS
        name = f"{style}{name}{_RESET}"

    size_label = ""
    if show_size_labels and node.entry is not None:
        size_label = " " + paint(_SIZE_COLOR, f"[{format_file_size(node.entry.size)}]")
    return f"{indent}  {name}{size_label}"


__all__ = [
    "format_file_size",
    "format_tree_row",
]
