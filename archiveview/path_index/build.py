"""Directory-tree construction from a flat entry list."""

from __future__ import annotations

import locale
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..ingest.types import Entry
from .types import TreeNode

logger = logging.getLogger(__name__)


@dataclass
class _ScratchNode:
    name: str
    path: str
    is_directory: bool
    children: list["_ScratchNode"] = field(default_factory=list)
    entry: Entry | None = None


def path_segments(path: str) -> list[str]:
    """Split a slash-separated path, ignoring empty segments."""
    return [part for part in path.split("/") if part]


def sibling_sort_key(is_directory: bool, name: str) -> tuple[bool, str, str]:
    """Directories first, then locale-aware case-folded name, then raw name."""
    return (not is_directory, locale.strxfrm(name.casefold()), name)


def _freeze(nodes: list[_ScratchNode]) -> tuple[TreeNode, ...]:
    ordered = sorted(nodes, key=lambda node: sibling_sort_key(node.is_directory, node.name))
    return tuple(
        TreeNode(
            name=node.name,
            path=node.path,
            is_directory=node.is_directory,
            children=_freeze(node.children) if node.is_directory else (),
            entry=None if node.is_directory else node.entry,
        )
        for node in ordered
    )


def build_tree(entries: Iterable[Entry]) -> tuple[TreeNode, ...]:
    """Group entries by shared path prefixes into a sorted forest.

    Exactly one node exists per distinct prefix. When a path is both a leaf
    and a directory prefix, the directory wins and the leaf entry is dropped.
    Repeated leaf paths keep their first entry.
    """
    roots: list[_ScratchNode] = []
    by_path: dict[str, _ScratchNode] = {}

    for entry in entries:
        parts = path_segments(entry.path)
        if not parts:
            logger.warning("skipping entry with empty path %r", entry.path)
            continue

        siblings = roots
        current_path = ""
        for depth, part in enumerate(parts):
            is_last = depth == len(parts) - 1
            current_path = f"{current_path}/{part}" if current_path else part
            node = by_path.get(current_path)
            if node is None:
                node = _ScratchNode(
                    name=part,
                    path=current_path,
                    is_directory=not is_last,
                    entry=entry if is_last else None,
                )
                by_path[current_path] = node
                siblings.append(node)
            elif is_last:
                if node.is_directory:
                    logger.warning("path %r is also a directory; dropping the file entry", current_path)
                else:
                    logger.debug("duplicate path %r; keeping first entry", current_path)
            elif not node.is_directory:
                logger.warning("path %r is also a directory; dropping the file entry", current_path)
                node.is_directory = True
                node.entry = None

            if not is_last:
                siblings = node.children

    return _freeze(roots)


__all__ = [
    "path_segments",
    "sibling_sort_key",
    "build_tree",
]
