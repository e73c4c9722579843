"""Exception types shared by the ingestion and storage layers."""

from __future__ import annotations


class ArchiveViewError(Exception):
    """Base class for recoverable archiveview failures."""


class ArchiveError(ArchiveViewError):
    """Uploaded container could not be decompressed."""


class StoreError(ArchiveViewError):
    """Persistent content store failed to complete an operation."""


class CorruptRecordError(StoreError):
    """Stored record does not match its own header."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"corrupt cache record {key[:12]}: {reason}")
        self.key = key
        self.reason = reason


class StoreNotInitializedError(RuntimeError):
    """Store was used before ``open()``.

    Not a ``StoreError``, so degrade-to-miss handlers let it propagate.
    """


__all__ = [
    "ArchiveViewError",
    "ArchiveError",
    "StoreError",
    "CorruptRecordError",
    "StoreNotInitializedError",
]
