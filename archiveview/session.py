"""Session orchestrator wiring the cache, path index, and window renderer.

Only one ingestion is current at a time. Every upload bumps a generation
token; completions that finish after a newer upload started are discarded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import ArchiveError, StoreError
from .ingest.cache import FingerprintedCache, IngestResult
from .ingest.types import Entry
from .path_index import NavigationState, PathIndex, TreeNode
from .preview import EntryPreview, build_entry_preview
from .window.viewport import WindowRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SessionSnapshot:
    entries: tuple[Entry, ...]
    tree: tuple[TreeNode, ...]
    state: NavigationState
    active_key: str | None
    preview: EntryPreview | None


class ArchiveSession:
    """One active container plus its tree and current preview."""

    def __init__(
        self,
        cache: FingerprintedCache,
        renderer: WindowRenderer | None = None,
        auto_expand: Iterable[str] = (),
    ) -> None:
        self.cache = cache
        self.index = PathIndex()
        self.renderer = renderer if renderer is not None else WindowRenderer()
        self.auto_expand = tuple(auto_expand)
        self.entries: tuple[Entry, ...] = ()
        self.active_key: str | None = None
        self.preview: EntryPreview | None = None
        self.last_error: Exception | None = None
        self.loading = False
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _snapshot(self) -> _SessionSnapshot:
        return _SessionSnapshot(
            entries=self.entries,
            tree=self.index.tree,
            state=self.index.state,
            active_key=self.active_key,
            preview=self.preview,
        )

    def _reset(self) -> None:
        self.entries = ()
        self.index.clear()
        self.active_key = None
        self.preview = None
        self.renderer.clear()

    def _restore(self, snapshot: _SessionSnapshot, remember: bool = True) -> None:
        self.entries = snapshot.entries
        self.index.load(snapshot.tree, snapshot.state)
        self.active_key = snapshot.active_key
        self.preview = snapshot.preview
        if snapshot.preview is not None and not snapshot.preview.is_binary:
            self.renderer.set_text(snapshot.preview.text)
        if remember and snapshot.active_key is not None:
            self.cache.remember(snapshot.active_key)

    def _apply(self, result: IngestResult) -> None:
        self.entries = result.entries
        self.index.rebuild(result.entries, self.auto_expand)
        self.active_key = result.key
        self.preview = None
        self.renderer.clear()

    async def start(self) -> IngestResult | None:
        """Open the cache and silently restore the last active container."""
        await self.cache.init()
        generation = self._generation
        result = await self.cache.restore_last_active()
        if result is None:
            return None
        if generation != self._generation:
            logger.debug("discarding warm start superseded by a newer upload")
            return None
        self._apply(result)
        logger.info("restored %d entries from cache", len(result.entries))
        return result

    async def upload(self, data: bytes, remember: bool = True) -> IngestResult | None:
        """Ingest a new container, replacing the active one.

        Returns ``None`` when the upload failed (see ``last_error``) or was
        superseded by a newer upload before it completed. Any other failure
        restores the previous container and propagates. With ``remember=False``
        the last-active pointer is left untouched.
        """
        self._generation += 1
        generation = self._generation
        snapshot = self._snapshot()
        self._reset()
        if remember:
            self.cache.forget_active()
        self.loading = True
        self.last_error = None

        try:
            result = await self.cache.ingest(data, remember=False)
        except ArchiveError as exc:
            if generation != self._generation:
                logger.debug("ignoring failure of superseded upload: %s", exc)
                return None
            self.last_error = exc
            logger.warning("ingestion failed: %s", exc)
            self._restore(snapshot, remember)
            return None
        except BaseException:
            if generation == self._generation:
                self._restore(snapshot, remember)
            raise
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug("discarding superseded upload %s", result.key[:12])
            return None
        self._apply(result)
        if remember:
            self.cache.remember(result.key)
        logger.info(
            "loaded %d entries (%s)",
            len(result.entries),
            "cache hit" if result.from_cache else "decompressed",
        )
        return result

    def close_archive(self) -> None:
        """Drop the active container and forget it as last active."""
        self._generation += 1
        self.loading = False
        self._reset()
        self.cache.forget_active()

    async def clear_cache(self) -> bool:
        """Close the archive and wipe the persistent cache."""
        self.close_archive()
        try:
            await self.cache.clear()
        except StoreError as exc:
            self.last_error = exc
            logger.warning("could not clear cache: %s", exc)
            return False
        return True

    def open_entry(self, path: str) -> EntryPreview | None:
        """Select ``path`` and load its preview; text previews go to the renderer."""
        entry = self.index.find_entry(path)
        if entry is None:
            return None
        self.index.select(entry.path)
        preview = build_entry_preview(entry)
        self.preview = preview
        if not preview.is_binary:
            self.renderer.set_text(preview.text)
        return preview

    def activate_focused(self) -> EntryPreview | None:
        entry = self.index.activate_focused()
        if entry is None:
            return None
        return self.open_entry(entry.path)

    def move_focus(self, delta: int) -> Entry | None:
        return self.index.move_focus(delta)

    def toggle(self, path: str) -> bool:
        return self.index.toggle(path)


__all__ = ["ArchiveSession"]
