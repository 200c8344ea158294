"""
Archive packaging for converted pages.
"""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass, field

from .errors import PackagingError

logger = logging.getLogger(__name__)

COMPRESSION_MODES = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


@dataclass(frozen=True)
class ArchiveEntry:
    """A named payload inside an archive; ``path`` uses ``/`` separators."""

    path: str
    data: bytes = field(repr=False)


def _check_path(path: str) -> None:
    if not path or path.startswith("/") or path.endswith("/"):
        raise PackagingError(f"Invalid archive path: {path!r}", path=path)

    parts = path.split("/")
    if len(parts) > 2:
        raise PackagingError(f"Archive path is nested too deeply: {path}", path=path)
    if any(part in ("", ".", "..") for part in parts):
        raise PackagingError(f"Invalid archive path: {path!r}", path=path)


class ArchivePacker:
    """Serialize a flat or one-level-deep tree of entries into a ZIP archive."""

    def __init__(self, compression: str = "deflated") -> None:
        if compression not in COMPRESSION_MODES:
            raise ValueError(f"Unknown compression mode: {compression}")
        self.compression = compression

    def pack(self, entries: Iterable[ArchiveEntry]) -> bytes:
        """
        Build a ZIP archive in memory.

        Entries are written in the order given.

        Raises:
            PackagingError: On an invalid or duplicate path, or if writing fails
        """
        buffer = io.BytesIO()
        seen: set[str] = set()

        try:
            with zipfile.ZipFile(buffer, "w", compression=COMPRESSION_MODES[self.compression]) as archive:
                for entry in entries:
                    _check_path(entry.path)
                    if entry.path in seen:
                        raise PackagingError(f"Duplicate archive entry: {entry.path}", path=entry.path)
                    seen.add(entry.path)
                    archive.writestr(entry.path, entry.data)
        except PackagingError:
            raise
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            raise PackagingError("Failed to build the archive", cause=e) from e

        logger.debug(f"Packed {len(seen)} entries ({buffer.tell()} bytes)")
        return buffer.getvalue()
