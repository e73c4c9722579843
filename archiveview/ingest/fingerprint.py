"""Content fingerprints used as cache keys."""

from __future__ import annotations

import hashlib

FINGERPRINT_CHUNK_BYTES = 1024 * 1024


def fingerprint(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of the full container bytes."""
    digest = hashlib.sha256()
    view = memoryview(data)
    for offset in range(0, len(view), FINGERPRINT_CHUNK_BYTES):
        digest.update(view[offset : offset + FINGERPRINT_CHUNK_BYTES])
    return digest.hexdigest()
