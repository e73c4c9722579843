"""Entry preview payloads: decoded text, or a placeholder for binary data."""

from __future__ import annotations

from dataclasses import dataclass

from .ingest.types import Entry
from .window.classify import is_binary
from .window.text import decode_text


@dataclass(frozen=True)
class EntryPreview:
    """What the viewer shows for one entry."""

    path: str
    is_binary: bool
    text: str


def binary_placeholder(path: str) -> str:
    return f"Binary file: {path}"


def build_entry_preview(entry: Entry) -> EntryPreview:
    """Classify ``entry`` and decode it when it is text."""
    if is_binary(entry.content):
        return EntryPreview(path=entry.path, is_binary=True, text=binary_placeholder(entry.path))
    return EntryPreview(path=entry.path, is_binary=False, text=decode_text(entry.content))


__all__ = [
    "EntryPreview",
    "binary_placeholder",
    "build_entry_preview",
]
