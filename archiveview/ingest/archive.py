"""ZIP container enumeration and eager entry materialization.

The rest of the package only sees ``ArchiveMember`` tuples and ``Entry``
records; this is the one module that knows the container format.
"""

from __future__ import annotations

import contextlib
import io
import zipfile
import zlib
from collections.abc import Iterable, Iterator
from functools import partial

from ..errors import ArchiveError
from .types import ArchiveMember, Entry

# zipfile reports encrypted members as RuntimeError and undecodable UTF-8
# names as UnicodeDecodeError (a ValueError)
_ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    EOFError,
    zlib.error,
    NotImplementedError,
    RuntimeError,
    ValueError,
)


@contextlib.contextmanager
def open_archive(data: bytes) -> Iterator[list[ArchiveMember]]:
    """Yield the container's members; readers stay valid inside the block.

    Malformed containers (and corrupt member data read inside the block)
    raise ``ArchiveError``.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
            members = [
                ArchiveMember(
                    path=info.filename,
                    is_dir=info.is_dir(),
                    size=int(info.file_size),
                    read=partial(zf.read, info),
                )
                for info in zf.infolist()
            ]
            yield members
    except _ARCHIVE_ERRORS as exc:
        raise ArchiveError(f"invalid archive: {exc}") from exc


def materialize_entries(members: Iterable[ArchiveMember]) -> list[Entry]:
    """Read every file member eagerly; directory members are skipped."""
    entries: list[Entry] = []
    for member in members:
        if member.is_dir:
            continue
        entries.append(Entry.from_bytes(member.path, member.read()))
    return entries


def decompress_entries(data: bytes) -> list[Entry]:
    """Decompress a whole container into its flat entry list."""
    with open_archive(data) as members:
        return materialize_entries(members)


__all__ = [
    "open_archive",
    "materialize_entries",
    "decompress_entries",
]
