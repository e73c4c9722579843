"""ZIP enumeration and materialization tests."""

from __future__ import annotations

import io
import unittest
import zipfile

from archiveview.errors import ArchiveError
from archiveview.ingest import Entry, decompress_entries, materialize_entries, open_archive


def _zip_bytes(files: dict[str, bytes], directories: tuple[str, ...] = ()) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for directory in directories:
            zf.writestr(zipfile.ZipInfo(directory), b"")
        for path, content in files.items():
            zf.writestr(path, content)
    return buffer.getvalue()


def _with_encrypted_flag(data: bytes) -> bytes:
    """Set the "encrypted" general-purpose bit on the first member."""
    patched = bytearray(data)
    patched[patched.find(b"PK\x03\x04") + 6] |= 0x01
    patched[patched.find(b"PK\x01\x02") + 8] |= 0x01
    return bytes(patched)


def _with_invalid_utf8_name(data: bytes, name: bytes) -> bytes:
    """Flag the first member name as UTF-8 and corrupt its first byte."""
    patched = bytearray(data.replace(name, b"\xff" + name[1:]))
    patched[patched.find(b"PK\x01\x02") + 9] |= 0x08
    return bytes(patched)


class ArchiveTests(unittest.TestCase):
    def test_open_archive_lists_files_and_directories_with_lazy_readers(self) -> None:
        data = _zip_bytes({"a/b.txt": b"0123456789"}, directories=("a/",))

        with open_archive(data) as members:
            by_path = {member.path: member for member in members}
            self.assertTrue(by_path["a/"].is_dir)
            self.assertFalse(by_path["a/b.txt"].is_dir)
            self.assertEqual(by_path["a/b.txt"].size, 10)
            self.assertEqual(by_path["a/b.txt"].read(), b"0123456789")

    def test_decompress_entries_skips_directories_and_keeps_order(self) -> None:
        data = _zip_bytes(
            {"a/b.txt": b"x" * 10, "a/c.txt": b"y" * 5, "d.txt": b"z"},
            directories=("a/",),
        )

        entries = decompress_entries(data)

        self.assertEqual([entry.path for entry in entries], ["a/b.txt", "a/c.txt", "d.txt"])
        self.assertEqual([entry.size for entry in entries], [10, 5, 1])
        for entry in entries:
            self.assertEqual(entry.size, len(entry.content))

    def test_materialize_entries_reads_each_file_once(self) -> None:
        calls: list[str] = []
        data = _zip_bytes({"one.txt": b"1", "two.txt": b"22"})

        with open_archive(data) as members:
            wrapped = []
            for member in members:
                def read(member=member) -> bytes:
                    calls.append(member.path)
                    return member.read()

                wrapped.append(type(member)(member.path, member.is_dir, member.size, read))
            entries = materialize_entries(wrapped)

        self.assertEqual(entries, [Entry.from_bytes("one.txt", b"1"), Entry.from_bytes("two.txt", b"22")])
        self.assertEqual(calls, ["one.txt", "two.txt"])

    def test_malformed_container_raises_archive_error(self) -> None:
        with self.assertRaises(ArchiveError):
            decompress_entries(b"this is not a zip file")

    def test_truncated_container_raises_archive_error(self) -> None:
        data = _zip_bytes({"big.txt": b"abc" * 1000})
        with self.assertRaises(ArchiveError):
            decompress_entries(data[: len(data) // 2])

    def test_encrypted_member_raises_archive_error(self) -> None:
        data = _with_encrypted_flag(_zip_bytes({"secret.txt": b"hidden"}))
        with self.assertRaises(ArchiveError):
            decompress_entries(data)

    def test_invalid_utf8_member_name_raises_archive_error(self) -> None:
        data = _with_invalid_utf8_name(_zip_bytes({"Xname.txt": b"data"}), b"Xname.txt")
        with self.assertRaises(ArchiveError):
            decompress_entries(data)


if __name__ == "__main__":
    unittest.main()
