"""Entry and cache-record datatypes used by the ingestion layer."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Entry:
    """One decompressed file: slash-separated path, raw bytes, byte length."""

    path: str
    content: bytes = field(repr=False)
    size: int

    @classmethod
    def from_bytes(cls, path: str, content: bytes) -> "Entry":
        return cls(path=path, content=bytes(content), size=len(content))


@dataclass(frozen=True)
class ArchiveMember:
    """One enumerated container member with a lazy byte accessor."""

    path: str
    is_dir: bool
    size: int
    read: Callable[[], bytes] = field(repr=False, compare=False)


@dataclass(frozen=True)
class CacheRecord:
    """Decoded entry set persisted under a container fingerprint."""

    key: str
    entries: tuple[Entry, ...]
    timestamp: float


@dataclass(frozen=True)
class CacheSummary:
    """Header of one cached container, without its entry payloads."""

    key: str
    timestamp: float
    entry_count: int


__all__ = [
    "Entry",
    "ArchiveMember",
    "CacheRecord",
    "CacheSummary",
]
