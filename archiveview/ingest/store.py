"""Persistent asynchronous key/value store for decoded entry sets.

``ContentStore`` is the contract the cache depends on. ``SqliteContentStore``
implements it on a single SQLite file: one header row per container plus one
row per entry, each call in its own transaction, run off the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..errors import CorruptRecordError, StoreError, StoreNotInitializedError
from .types import CacheRecord, CacheSummary, Entry

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
MEMORY_DATABASE = ":memory:"

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS archives (
        key TEXT PRIMARY KEY,
        timestamp REAL NOT NULL,
        entry_count INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS entries (
        key TEXT NOT NULL,
        position INTEGER NOT NULL,
        path TEXT NOT NULL,
        size INTEGER NOT NULL,
        content BLOB NOT NULL,
        PRIMARY KEY (key, position)
    )
    """,
)


class ContentStore(Protocol):
    """Asynchronous store of ``CacheRecord`` values keyed by fingerprint."""

    async def open(self) -> None:
        ...

    async def get(self, key: str) -> CacheRecord | None:
        ...

    async def put(self, key: str, entries: Sequence[Entry]) -> CacheRecord:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def clear(self) -> None:
        ...

    async def summaries(self) -> list[CacheSummary]:
        ...

    async def close(self) -> None:
        ...


class SqliteContentStore:
    """``ContentStore`` backed by one SQLite database file."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreNotInitializedError("content store used before open()")
        return self._conn

    def _open_sync(self) -> None:
        if self._conn is not None:
            return
        if str(self.path) != MEMORY_DATABASE:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path), check_same_thread=False)
        try:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            if version not in (0, SCHEMA_VERSION):
                raise StoreError(f"unsupported cache schema version {version}")
            with conn:
                for statement in _SCHEMA:
                    conn.execute(statement)
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        except BaseException:
            conn.close()
            raise
        self._conn = conn

    async def open(self) -> None:
        """Open (and create if needed) the database. Raises ``StoreError``."""
        try:
            await asyncio.to_thread(self._open_sync)
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(f"cannot open content store {self.path}: {exc}") from exc

    def _get_sync(self, key: str) -> CacheRecord | None:
        conn = self._connection()
        with self._lock:
            header = conn.execute(
                "SELECT timestamp, entry_count FROM archives WHERE key = ?",
                (key,),
            ).fetchone()
            if header is None:
                return None
            rows = conn.execute(
                "SELECT position, path, size, content FROM entries WHERE key = ? ORDER BY position",
                (key,),
            ).fetchall()

        timestamp, entry_count = header
        if len(rows) != entry_count:
            raise CorruptRecordError(key, f"expected {entry_count} entries, found {len(rows)}")
        entries: list[Entry] = []
        for expected_position, (position, path, size, content) in enumerate(rows):
            if position != expected_position:
                raise CorruptRecordError(key, f"missing entry at position {expected_position}")
            if not isinstance(path, str) or not isinstance(content, bytes):
                raise CorruptRecordError(key, f"malformed entry at position {position}")
            if size != len(content):
                raise CorruptRecordError(key, f"size mismatch for {path!r}")
            entries.append(Entry(path=path, content=content, size=size))
        return CacheRecord(key=key, entries=tuple(entries), timestamp=float(timestamp))

    async def get(self, key: str) -> CacheRecord | None:
        """Return the record for ``key`` or ``None`` on a miss."""
        started = time.perf_counter()
        try:
            record = await asyncio.to_thread(self._get_sync, key)
        except sqlite3.Error as exc:
            raise StoreError(f"cache read failed: {exc}") from exc
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if record is None:
            logger.debug("cache get took %.2fms (cache miss)", elapsed_ms)
        else:
            logger.debug("cache get took %.2fms for %d files", elapsed_ms, len(record.entries))
        return record

    def _put_sync(self, record: CacheRecord) -> None:
        conn = self._connection()
        with self._lock, conn:
            conn.execute("DELETE FROM entries WHERE key = ?", (record.key,))
            conn.execute(
                "INSERT OR REPLACE INTO archives (key, timestamp, entry_count) VALUES (?, ?, ?)",
                (record.key, record.timestamp, len(record.entries)),
            )
            conn.executemany(
                "INSERT INTO entries (key, position, path, size, content) VALUES (?, ?, ?, ?, ?)",
                (
                    (record.key, position, entry.path, entry.size, entry.content)
                    for position, entry in enumerate(record.entries)
                ),
            )

    async def put(self, key: str, entries: Sequence[Entry]) -> CacheRecord:
        """Upsert the entry set for ``key``; the last writer wins."""
        record = CacheRecord(key=key, entries=tuple(entries), timestamp=time.time())
        started = time.perf_counter()
        try:
            await asyncio.to_thread(self._put_sync, record)
        except sqlite3.Error as exc:
            raise StoreError(f"cache write failed: {exc}") from exc
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.debug("cache save took %.2fms for %d files", elapsed_ms, len(record.entries))
        return record

    def _delete_sync(self, key: str) -> None:
        conn = self._connection()
        with self._lock, conn:
            conn.execute("DELETE FROM entries WHERE key = ?", (key,))
            conn.execute("DELETE FROM archives WHERE key = ?", (key,))

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete_sync, key)
        except sqlite3.Error as exc:
            raise StoreError(f"cache delete failed: {exc}") from exc

    def _clear_sync(self) -> None:
        conn = self._connection()
        with self._lock, conn:
            conn.execute("DELETE FROM entries")
            conn.execute("DELETE FROM archives")

    async def clear(self) -> None:
        """Remove every cached record."""
        try:
            await asyncio.to_thread(self._clear_sync)
        except sqlite3.Error as exc:
            raise StoreError(f"cache clear failed: {exc}") from exc

    def _summaries_sync(self) -> list[CacheSummary]:
        conn = self._connection()
        with self._lock:
            rows = conn.execute(
                "SELECT key, timestamp, entry_count FROM archives ORDER BY timestamp DESC, key"
            ).fetchall()
        return [CacheSummary(key=key, timestamp=float(ts), entry_count=int(count)) for key, ts, count in rows]

    async def summaries(self) -> list[CacheSummary]:
        """List cached containers, newest first."""
        try:
            return await asyncio.to_thread(self._summaries_sync)
        except sqlite3.Error as exc:
            raise StoreError(f"cache listing failed: {exc}") from exc

    async def close(self) -> None:
        conn = self._conn
        self._conn = None
        if conn is not None:
            with self._lock:
                conn.close()


__all__ = [
    "ContentStore",
    "SqliteContentStore",
]
