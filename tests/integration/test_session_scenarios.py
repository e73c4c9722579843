"""End-to-end session scenarios: upload, warm restart, previews, supersede.

Each case runs against a real SQLite store and an isolated config file.
"""

from __future__ import annotations

import asyncio
import io
import tempfile
import threading
import unittest
import zipfile
from pathlib import Path
from unittest import mock

from archiveview.config import LastActivePointer
from archiveview.errors import ArchiveError
from archiveview.ingest import Entry, FingerprintedCache, SqliteContentStore, decompress_entries, fingerprint
from archiveview.path_index import TreeNode
from archiveview.session import ArchiveSession
from archiveview.window import WindowRenderer


def _zip_bytes(files: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for path, content in files.items():
            zf.writestr(path, content)
    return buffer.getvalue()


SCENARIO = _zip_bytes({"a/b.txt": b"x" * 10, "a/c.txt": b"y" * 5, "d.txt": b"z"})
MEDIA = _zip_bytes({"media/photo.jpg": b"\xff\xd8\xff\xe0\x00\x10JFIF\x00", "notes.md": b"# notes\n"})


class _CountingStore(SqliteContentStore):
    def __init__(self, path: Path) -> None:
        super().__init__(path)
        self.puts: list[str] = []

    async def put(self, key: str, entries):
        self.puts.append(key)
        return await super().put(key, entries)


class _GatedDecompress:
    """Blocks decompression of one payload until released."""

    def __init__(self, gated: bytes) -> None:
        self.gated = gated
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def __call__(self, data: bytes) -> list[Entry]:
        self.calls += 1
        if data == self.gated:
            self.started.set()
            self.release.wait(5)
        return decompress_entries(data)


class SessionScenarioTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.config_path = root / "config.json"
        self.db_path = root / "cache.sqlite3"
        self.pointer = LastActivePointer(self.config_path)
        self.sessions: list[ArchiveSession] = []

    async def asyncTearDown(self) -> None:
        for session in self.sessions:
            await session.cache.close()
        self._tmp.cleanup()

    async def _session(self, store=None, decompress=decompress_entries, renderer=None) -> ArchiveSession:
        cache = FingerprintedCache(
            store if store is not None else SqliteContentStore(self.db_path),
            LastActivePointer(self.config_path),
            decompress=decompress,
        )
        session = ArchiveSession(cache, renderer=renderer)
        self.sessions.append(session)
        await session.start()
        return session

    async def test_fresh_upload_builds_tree_writes_once_and_sets_pointer(self) -> None:
        store = _CountingStore(self.db_path)
        session = await self._session(store=store)

        result = await session.upload(SCENARIO)

        assert result is not None
        self.assertFalse(result.from_cache)
        self.assertEqual(
            session.index.tree,
            (
                TreeNode(
                    "a",
                    "a",
                    True,
                    (TreeNode("b.txt", "a/b.txt", False), TreeNode("c.txt", "a/c.txt", False)),
                ),
                TreeNode("d.txt", "d.txt", False),
            ),
        )
        self.assertEqual(store.puts, [fingerprint(SCENARIO)])
        self.assertEqual(self.pointer.read(), fingerprint(SCENARIO))
        self.assertEqual(session.active_key, fingerprint(SCENARIO))
        self.assertFalse(session.loading)

    async def test_warm_restart_restores_without_decompressing(self) -> None:
        first = await self._session()
        await first.upload(SCENARIO)
        original_tree = first.index.tree
        await first.cache.close()

        counting = _GatedDecompress(gated=b"")
        second = await self._session(decompress=counting)

        self.assertEqual(counting.calls, 0)
        self.assertEqual(second.active_key, fingerprint(SCENARIO))
        self.assertEqual(second.index.tree, original_tree)
        self.assertEqual([entry.path for entry in second.entries], ["a/b.txt", "a/c.txt", "d.txt"])

    async def test_reupload_of_same_bytes_is_a_cache_hit(self) -> None:
        store = _CountingStore(self.db_path)
        session = await self._session(store=store)
        await session.upload(SCENARIO)

        again = await session.upload(SCENARIO)

        assert again is not None
        self.assertTrue(again.from_cache)
        self.assertEqual(len(store.puts), 1)
        self.assertEqual(self.pointer.read(), again.key)

    async def test_binary_entry_never_reaches_window_renderer(self) -> None:
        renderer = mock.create_autospec(WindowRenderer, instance=True)
        session = await self._session(renderer=renderer)
        await session.upload(MEDIA)
        renderer.reset_mock()

        preview = session.open_entry("media/photo.jpg")

        assert preview is not None
        self.assertTrue(preview.is_binary)
        self.assertEqual(preview.text, "Binary file: media/photo.jpg")
        self.assertEqual(renderer.method_calls, [])
        self.assertEqual(session.index.state.selected_path, "media/photo.jpg")

    async def test_text_entry_is_windowed(self) -> None:
        session = await self._session()
        await session.upload(MEDIA)

        preview = session.open_entry("notes.md")

        assert preview is not None
        self.assertFalse(preview.is_binary)
        self.assertEqual(session.renderer.text, "# notes\n")
        self.assertEqual(session.index.focused().path, "notes.md")
        self.assertEqual(session.index.state.selected_path, "notes.md")

    async def test_keyboard_navigation_opens_focused_entry(self) -> None:
        session = await self._session()
        await session.upload(SCENARIO)
        session.toggle("a")

        session.move_focus(1)
        session.move_focus(1)
        preview = session.activate_focused()

        assert preview is not None
        self.assertEqual(preview.path, "a/c.txt")
        self.assertEqual(session.renderer.text, "yyyyy")

    async def test_newer_upload_supersedes_slow_one(self) -> None:
        gated = _GatedDecompress(gated=SCENARIO)
        session = await self._session(decompress=gated)

        slow = asyncio.create_task(session.upload(SCENARIO))
        await asyncio.to_thread(gated.started.wait, 5)
        self.assertEqual(session.entries, ())
        self.assertTrue(session.loading)
        self.assertIsNone(self.pointer.read())

        fast = await session.upload(MEDIA)
        gated.release.set()
        stale = await slow

        assert fast is not None
        self.assertIsNone(stale)
        self.assertEqual(session.active_key, fingerprint(MEDIA))
        self.assertEqual(self.pointer.read(), fingerprint(MEDIA))
        self.assertEqual([entry.path for entry in session.entries], ["media/photo.jpg", "notes.md"])

    async def test_failed_upload_restores_previous_archive(self) -> None:
        session = await self._session()
        good = await session.upload(SCENARIO)
        session.open_entry("d.txt")

        with self.assertLogs("archiveview.session", level="WARNING"):
            result = await session.upload(b"this is not a zip container")

        assert good is not None
        self.assertIsNone(result)
        self.assertIsInstance(session.last_error, ArchiveError)
        self.assertEqual(session.active_key, good.key)
        self.assertEqual(session.entries, good.entries)
        self.assertEqual(self.pointer.read(), good.key)
        self.assertEqual(session.index.state.selected_path, "d.txt")
        self.assertEqual(session.renderer.text, "z")
        self.assertFalse(session.loading)

    async def test_encrypted_upload_restores_previous_archive(self) -> None:
        session = await self._session()
        good = await session.upload(SCENARIO)
        encrypted = bytearray(_zip_bytes({"secret.txt": b"hidden"}))
        encrypted[encrypted.find(b"PK\x03\x04") + 6] |= 0x01
        encrypted[encrypted.find(b"PK\x01\x02") + 8] |= 0x01

        with self.assertLogs("archiveview.session", level="WARNING"):
            result = await session.upload(bytes(encrypted))

        assert good is not None
        self.assertIsNone(result)
        self.assertIsInstance(session.last_error, ArchiveError)
        self.assertEqual(session.entries, good.entries)
        self.assertEqual(self.pointer.read(), good.key)
        self.assertFalse(session.loading)

    async def test_unexpected_ingest_error_restores_state_and_propagates(self) -> None:
        def explode(data: bytes) -> list[Entry]:
            if data == MEDIA:
                raise LookupError("collaborator bug")
            return decompress_entries(data)

        session = await self._session(decompress=explode)
        good = await session.upload(SCENARIO)

        with self.assertRaises(LookupError):
            await session.upload(MEDIA)

        assert good is not None
        self.assertEqual(session.active_key, good.key)
        self.assertEqual(session.entries, good.entries)
        self.assertEqual(self.pointer.read(), good.key)
        self.assertFalse(session.loading)

    async def test_upload_without_remember_keeps_pointer(self) -> None:
        session = await self._session()
        good = await session.upload(SCENARIO)

        other = await session.upload(MEDIA, remember=False)

        assert good is not None and other is not None
        self.assertEqual(session.active_key, other.key)
        self.assertEqual(self.pointer.read(), good.key)

    async def test_close_archive_clears_state_and_pointer(self) -> None:
        session = await self._session()
        await session.upload(SCENARIO)
        session.open_entry("d.txt")

        session.close_archive()

        self.assertEqual(session.entries, ())
        self.assertEqual(session.index.tree, ())
        self.assertIsNone(session.active_key)
        self.assertIsNone(session.preview)
        self.assertTrue(session.renderer.is_empty)
        self.assertIsNone(self.pointer.read())

    async def test_close_during_upload_discards_completion(self) -> None:
        gated = _GatedDecompress(gated=SCENARIO)
        session = await self._session(decompress=gated)

        pending = asyncio.create_task(session.upload(SCENARIO))
        await asyncio.to_thread(gated.started.wait, 5)
        session.close_archive()
        gated.release.set()

        self.assertIsNone(await pending)
        self.assertEqual(session.entries, ())
        self.assertIsNone(self.pointer.read())

    async def test_clear_cache_forgets_everything(self) -> None:
        session = await self._session()
        await session.upload(SCENARIO)

        self.assertTrue(await session.clear_cache())

        self.assertEqual(await session.cache.summaries(), [])
        self.assertIsNone(self.pointer.read())
        restarted = await self._session()
        self.assertIsNone(restarted.active_key)


if __name__ == "__main__":
    unittest.main()
