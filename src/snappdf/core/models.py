"""
Data model shared by the conversion and merge pipelines.

Documents are held in memory for the duration of one run; the single
downloadable result of a run is an OutputArtifact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ItemStatus(Enum):
    """Lifecycle of one document within a conversion batch."""

    PENDING = "pending"
    CONVERTED = "converted"
    ERRORED = "errored"


class ArtifactKind(Enum):
    """Kind of downloadable artifact, valued by its MIME type."""

    PNG = "image/png"
    ZIP = "application/zip"
    PDF = "application/pdf"

    @property
    def mime_type(self) -> str:
        return self.value


class PackagingTopology(Enum):
    """How the pages of a conversion batch are packaged."""

    SINGLE_IMAGE = "single_image"
    FLAT_ARCHIVE = "flat_archive"
    NESTED_ARCHIVE = "nested_archive"


@dataclass(frozen=True)
class InputDocument:
    """A PDF accepted for the current run."""

    name: str
    data: bytes = field(repr=False)
    media_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PageImage:
    """One rasterized page, PNG encoded. ``page_number`` is 1-based."""

    document_name: str
    page_number: int
    png_data: bytes = field(repr=False)


@dataclass
class ConversionItem:
    """
    Conversion progress for one input document.

    Pages are only attached once every page of the document rendered, so a
    packaging step never sees a partially converted document.
    """

    document: InputDocument
    pages: list[PageImage] = field(default_factory=list)
    status: ItemStatus = ItemStatus.PENDING
    error_detail: str | None = None

    @property
    def name(self) -> str:
        return self.document.name

    @property
    def page_numbers(self) -> list[int]:
        return [page.page_number for page in self.pages]

    def mark_converted(self, pages: list[PageImage]) -> None:
        self.pages = list(pages)
        self.status = ItemStatus.CONVERTED
        self.error_detail = None

    def mark_errored(self, detail: str) -> None:
        self.pages = []
        self.status = ItemStatus.ERRORED
        self.error_detail = detail


@dataclass
class MergeItem:
    """A document in the merge list; ``order`` is the only ranking key."""

    document: InputDocument
    order: int

    @property
    def name(self) -> str:
        return self.document.name


@dataclass
class OutputArtifact:
    """
    The single downloadable result of a completed run.

    Once released the payload is dropped; the owner of a newer artifact
    releases the old one so payloads do not pile up across runs.
    """

    payload: bytes = field(repr=False)
    suggested_file_name: str
    kind: ArtifactKind
    released: bool = False

    @property
    def data(self) -> bytes:
        if self.released:
            raise RuntimeError(f"Artifact {self.suggested_file_name} has been released")
        return self.payload

    @property
    def size(self) -> int:
        return 0 if self.released else len(self.payload)

    @property
    def mime_type(self) -> str:
        return self.kind.mime_type

    def release(self) -> None:
        """Drop the payload. Calling this more than once is harmless."""
        self.payload = b""
        self.released = True
