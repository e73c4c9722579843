"""Content-addressed ingestion: fingerprinting, decompression, persistent cache.

This package contains the non-UI ingestion pipeline:
- entry and cache-record datatypes
- the ZIP decompression collaborator
- the asynchronous SQLite content store
- the fingerprint-keyed cache with warm-start restore
"""

from __future__ import annotations

from .archive import decompress_entries, materialize_entries, open_archive
from .cache import FingerprintedCache, IngestResult
from .fingerprint import fingerprint
from .store import ContentStore, SqliteContentStore
from .types import ArchiveMember, CacheRecord, CacheSummary, Entry

__all__ = [
    "Entry",
    "ArchiveMember",
    "CacheRecord",
    "CacheSummary",
    "fingerprint",
    "open_archive",
    "materialize_entries",
    "decompress_entries",
    "ContentStore",
    "SqliteContentStore",
    "FingerprintedCache",
    "IngestResult",
]
