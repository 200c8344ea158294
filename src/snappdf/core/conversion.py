"""
Batch conversion of PDF documents to PNG images.

Documents are rasterized strictly one after another, page by page, and the
first failing page aborts the whole batch. The shape of the batch decides how
the pages are packaged:

- one document with one page: the PNG itself (``<base>.png``)
- one document with several pages: a flat ZIP (``<base>.zip``) of
  ``<base>_<page>.png`` entries
- several documents: ``converted_files.zip`` with one folder per document
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .errors import ConversionError, ErrorCode, InsufficientInputError, PageRenderError
from .models import (
    ArtifactKind,
    ConversionItem,
    InputDocument,
    OutputArtifact,
    PackagingTopology,
    PageImage,
)
from .packer import ArchiveEntry, ArchivePacker
from .pdf_utils import base_name
from .rasterizer import DEFAULT_SCALE_FACTOR, PageRasterizer

logger = logging.getLogger(__name__)

MULTI_DOCUMENT_ARCHIVE_NAME = "converted_files.zip"
FALLBACK_FOLDER_NAME = "document"

ItemCallback = Callable[[int, ConversionItem], None]  # (index, item)


def select_topology(document_count: int, sole_page_count: int | None = None) -> PackagingTopology:
    """
    Pick the packaging topology for a batch.

    Args:
        document_count: Number of documents in the batch (>= 1)
        sole_page_count: Page count of the only document, when there is one
    """
    if document_count < 1:
        raise ValueError("A batch needs at least one document")
    if document_count > 1:
        return PackagingTopology.NESTED_ARCHIVE
    if sole_page_count == 1:
        return PackagingTopology.SINGLE_IMAGE
    return PackagingTopology.FLAT_ARCHIVE


def page_file_name(document_base: str, page_number: int) -> str:
    return f"{document_base}_{page_number}.png"


def unique_folder_names(bases: Sequence[str]) -> list[str]:
    """
    Give repeated base names a ``" (n)"`` suffix: a, a -> a, a (2).

    Bases that are not usable as a folder name ("", "." and "..", from files
    named ``.pdf``, ``..pdf`` or ``...pdf``) become ``document``.
    """
    used: set[str] = set()
    folders: list[str] = []
    for base in bases:
        if base in ("", ".", ".."):
            base = FALLBACK_FOLDER_NAME
        candidate = base
        n = 1
        while candidate in used:
            n += 1
            candidate = f"{base} ({n})"
        used.add(candidate)
        folders.append(candidate)
    return folders


class ConversionOrchestrator:
    """Drives rasterization across a batch and packages the result."""

    def __init__(
        self,
        rasterizer: PageRasterizer | None = None,
        packer: ArchivePacker | None = None,
        scale_factor: float = DEFAULT_SCALE_FACTOR,
    ) -> None:
        self.rasterizer = rasterizer or PageRasterizer()
        self.packer = packer or ArchivePacker()
        self.scale_factor = scale_factor

    def convert(
        self,
        documents: Sequence[InputDocument],
        items: Sequence[ConversionItem] | None = None,
        item_cb: ItemCallback | None = None,
    ) -> OutputArtifact:
        """
        Convert a batch of documents into one artifact.

        Args:
            documents: Documents in processing order
            items: Optional pre-built items to update in place, one per document
            item_cb: Called with (index, item) whenever an item is converted or errored

        Returns:
            The packaged OutputArtifact

        Raises:
            InsufficientInputError: If the batch is empty
            ConversionError: If any document fails; later documents are not attempted
        """
        if not documents:
            raise InsufficientInputError(minimum=1, actual=0, operation="convert")

        if items is None:
            items = [ConversionItem(document=document) for document in documents]
        elif len(items) != len(documents):
            raise ValueError("items must match documents one to one")

        logger.info(f"Converting {len(documents)} document(s)")

        try:
            for index, item in enumerate(items):
                try:
                    pages = self._rasterize(item.document)
                except ConversionError as e:
                    item.mark_errored(e.user_message)
                    if item_cb:
                        item_cb(index, item)
                    raise

                item.mark_converted(pages)
                logger.info(f"Converted {item.name} ({len(pages)} page(s))")
                if item_cb:
                    item_cb(index, item)
        finally:
            self.rasterizer.close()

        return self._package(items)

    def _rasterize(self, document: InputDocument) -> list[PageImage]:
        try:
            page_count = self.rasterizer.count_pages(document.data)
        except Exception as e:
            raise ConversionError(
                document.name,
                f"Could not open {document.name}: the file is not a readable PDF",
                cause=e,
                code=ErrorCode.DOCUMENT_LOAD_FAILED,
            ) from e

        if page_count < 1:
            raise ConversionError(document.name, f"{document.name} has no pages", code=ErrorCode.NO_PAGES)

        pages: list[PageImage] = []
        for page_index in range(page_count):
            page_number = page_index + 1
            try:
                png_data = self.rasterizer.render(document.data, page_index, self.scale_factor)
            except Exception as e:
                logger.error(f"Error processing page {page_number} of {document.name}: {e}")
                raise PageRenderError(document.name, page_number, cause=e) from e

            pages.append(PageImage(document_name=document.name, page_number=page_number, png_data=png_data))
            logger.debug(f"Rendered {document.name} page {page_number}/{page_count}")

        return pages

    def _package(self, items: Sequence[ConversionItem]) -> OutputArtifact:
        sole_page_count = len(items[0].pages) if len(items) == 1 else None
        topology = select_topology(len(items), sole_page_count)

        if topology is PackagingTopology.SINGLE_IMAGE:
            item = items[0]
            return OutputArtifact(
                payload=item.pages[0].png_data,
                suggested_file_name=f"{base_name(item.name)}.png",
                kind=ArtifactKind.PNG,
            )

        if topology is PackagingTopology.FLAT_ARCHIVE:
            base = base_name(items[0].name)
            entries = [ArchiveEntry(page_file_name(base, page.page_number), page.png_data) for page in items[0].pages]
            archive_name = f"{base}.zip"
        else:
            bases = [base_name(item.name) for item in items]
            entries = [
                ArchiveEntry(f"{folder}/{page_file_name(base, page.page_number)}", page.png_data)
                for item, base, folder in zip(items, bases, unique_folder_names(bases))
                for page in item.pages
            ]
            archive_name = MULTI_DOCUMENT_ARCHIVE_NAME

        logger.info(f"Packaging {len(entries)} page(s) as {archive_name} ({topology.value})")
        return OutputArtifact(payload=self.packer.pack(entries), suggested_file_name=archive_name, kind=ArtifactKind.ZIP)
