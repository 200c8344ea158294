"""
Tests for ZIP archive packaging.
"""

import io
import zipfile

import pytest

from snappdf.core.errors import PackagingError
from snappdf.core.packer import ArchiveEntry, ArchivePacker


def read_archive(data: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


class TestArchivePacker:
    def test_flat_entries_in_order(self):
        entries = [ArchiveEntry("doc_2.png", b"two"), ArchiveEntry("doc_1.png", b"one")]

        data = ArchivePacker().pack(entries)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ["doc_2.png", "doc_1.png"]
        assert read_archive(data)["doc_1.png"] == b"one"

    def test_nested_entries(self):
        entries = [ArchiveEntry("a/a_1.png", b"1"), ArchiveEntry("b/b_1.png", b"2")]

        contents = read_archive(ArchivePacker().pack(entries))

        assert contents == {"a/a_1.png": b"1", "b/b_1.png": b"2"}

    @pytest.mark.parametrize("compression, expected", [("deflated", zipfile.ZIP_DEFLATED), ("stored", zipfile.ZIP_STORED)])
    def test_compression_modes(self, compression, expected):
        data = ArchivePacker(compression).pack([ArchiveEntry("a.png", b"x" * 100)])

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.getinfo("a.png").compress_type == expected

    def test_unknown_compression(self):
        with pytest.raises(ValueError):
            ArchivePacker("lzma")

    def test_empty_archive(self):
        assert read_archive(ArchivePacker().pack([])) == {}

    def test_duplicate_entry(self):
        entries = [ArchiveEntry("a.png", b"1"), ArchiveEntry("a.png", b"2")]

        with pytest.raises(PackagingError, match="Duplicate"):
            ArchivePacker().pack(entries)

    @pytest.mark.parametrize("path", ["", "/abs.png", "dir/", "a/b/c.png", "../up.png", "./a.png"])
    def test_invalid_paths(self, path):
        with pytest.raises(PackagingError):
            ArchivePacker().pack([ArchiveEntry(path, b"x")])
