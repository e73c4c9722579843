"""Fingerprint determinism and sensitivity tests."""

from __future__ import annotations

import hashlib
import unittest

from archiveview.ingest import fingerprint
from archiveview.ingest.fingerprint import FINGERPRINT_CHUNK_BYTES


class FingerprintTests(unittest.TestCase):
    def test_identical_bytes_yield_identical_keys(self) -> None:
        data = b"PK\x03\x04" + bytes(range(256)) * 40
        self.assertEqual(fingerprint(data), fingerprint(bytes(data)))

    def test_key_is_hex_sha256_of_full_content(self) -> None:
        data = b"x" * (FINGERPRINT_CHUNK_BYTES * 2 + 17)
        self.assertEqual(fingerprint(data), hashlib.sha256(data).hexdigest())

    def test_single_byte_difference_changes_key(self) -> None:
        base = bytearray(b"a" * 4096)
        flipped = bytearray(base)
        flipped[-1] ^= 0x01
        appended = bytes(base) + b"\x00"

        keys = {fingerprint(bytes(base)), fingerprint(bytes(flipped)), fingerprint(appended)}
        self.assertEqual(len(keys), 3)

    def test_empty_input_has_stable_key(self) -> None:
        self.assertEqual(fingerprint(b""), hashlib.sha256(b"").hexdigest())


if __name__ == "__main__":
    unittest.main()
