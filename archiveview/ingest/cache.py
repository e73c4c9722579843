"""Content-addressed ingestion cache.

A container is decompressed once per distinct fingerprint. Later uploads of
the same bytes, and warm starts from the remembered "last active"
fingerprint, read the decoded entries straight from the content store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..config import LastActivePointer
from ..errors import CorruptRecordError, StoreError
from .archive import decompress_entries
from .fingerprint import fingerprint
from .store import ContentStore
from .types import CacheSummary, Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingestion: key, entries, and whether the store served them."""

    key: str
    entries: tuple[Entry, ...]
    from_cache: bool


class FingerprintedCache:
    """Fingerprint-keyed cache in front of the decompression collaborator.

    The store must be ``init()``-ed first. When that fails the cache keeps
    working in "always miss" mode: every ingestion decompresses and nothing
    is written.
    """

    def __init__(
        self,
        store: ContentStore,
        pointer: LastActivePointer,
        decompress: Callable[[bytes], Sequence[Entry]] = decompress_entries,
    ) -> None:
        self._store = store
        self._pointer = pointer
        self._decompress = decompress
        self._available = False

    @property
    def available(self) -> bool:
        return self._available

    async def init(self) -> bool:
        """Open the store; returns whether caching is available."""
        try:
            await self._store.open()
        except Exception as exc:
            logger.warning("content store unavailable, continuing without cache: %s", exc)
            self._available = False
            return False
        self._available = True
        return True

    async def lookup(self, key: str) -> tuple[Entry, ...] | None:
        """Return cached entries for ``key``; every failure is a miss."""
        if not self._available:
            return None
        try:
            record = await self._store.get(key)
        except CorruptRecordError as exc:
            logger.warning("discarding %s", exc)
            await self._discard(key)
            return None
        except StoreError as exc:
            logger.warning("cache lookup failed, treating as miss: %s", exc)
            return None
        if record is None:
            return None
        return record.entries

    async def _discard(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except StoreError as exc:
            logger.warning("could not delete corrupt record: %s", exc)

    async def store_entries(self, key: str, entries: Sequence[Entry]) -> bool:
        """Write ``entries`` under ``key``; failures are logged, not raised."""
        if not self._available:
            return False
        try:
            await self._store.put(key, entries)
        except StoreError as exc:
            logger.warning("cache write failed, continuing uncached: %s", exc)
            return False
        return True

    async def ingest(self, data: bytes, remember: bool = True) -> IngestResult:
        """Turn raw container bytes into entries, decompressing only on a miss.

        Raises ``ArchiveError`` when the container cannot be decompressed; in
        that case nothing is written to the store or the pointer.
        """
        key = await asyncio.to_thread(fingerprint, data)
        cached = await self.lookup(key)
        if cached is not None:
            logger.debug("cache hit for %s (%d entries)", key[:12], len(cached))
            if remember:
                self.remember(key)
            return IngestResult(key=key, entries=cached, from_cache=True)

        logger.debug("cache miss for %s, decompressing %d bytes", key[:12], len(data))
        entries = tuple(await asyncio.to_thread(self._decompress, data))
        await self.store_entries(key, entries)
        if remember:
            self.remember(key)
        return IngestResult(key=key, entries=entries, from_cache=False)

    async def restore_last_active(self) -> IngestResult | None:
        """Best-effort warm start from the remembered fingerprint."""
        key = self._pointer.read()
        if key is None:
            return None
        entries = await self.lookup(key)
        if entries is None:
            logger.info("restoration unavailable for %s", key[:12])
            return None
        return IngestResult(key=key, entries=entries, from_cache=True)

    def remember(self, key: str) -> None:
        self._pointer.write(key)

    def remembered(self) -> str | None:
        return self._pointer.read()

    def forget_active(self) -> None:
        self._pointer.clear()

    async def clear(self) -> None:
        """Forget the active container and wipe every cached record."""
        self.forget_active()
        if not self._available:
            return
        await self._store.clear()

    async def summaries(self) -> list[CacheSummary]:
        if not self._available:
            return []
        return await self._store.summaries()

    async def close(self) -> None:
        if self._available:
            await self._store.close()
        self._available = False


__all__ = [
    "IngestResult",
    "FingerprintedCache",
]
