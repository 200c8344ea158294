"""
PDF page copying and serialization using pypdf.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence

from pypdf import PageObject, PdfReader, PdfWriter

from .errors import DocumentLoadError, ErrorCode, MergeCopyError, MergeError

logger = logging.getLogger(__name__)


class DocumentMerger:
    """Thin adapter over pypdf used by the merge orchestrator."""

    def load(self, name: str, pdf_bytes: bytes) -> PdfReader:
        """
        Open a PDF from memory.

        Encrypted documents are accepted only if they open with an empty
        password.

        Raises:
            DocumentLoadError: If the document is empty, malformed or locked
        """
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            if reader.is_encrypted and not reader.decrypt(""):
                raise ValueError("document is password protected")
            # Force the page tree to be parsed so broken files fail here.
            len(reader.pages)
        except Exception as e:
            raise DocumentLoadError(name, cause=e) from e
        return reader

    def copy_pages(self, name: str, reader: PdfReader, indices: Sequence[int] | None = None) -> list[PageObject]:
        """
        Get page handles of a loaded document in their original order.

        Args:
            name: Document name, for error reporting
            reader: Document returned by ``load``
            indices: Optional 0-based subset of pages (default: all)

        Raises:
            MergeCopyError: If a page cannot be read
        """
        try:
            if indices is None:
                return list(reader.pages)
            return [reader.pages[i] for i in indices]
        except Exception as e:
            raise MergeCopyError(name, cause=e) from e

    def new_document(self) -> PdfWriter:
        return PdfWriter()

    def append_pages(self, name: str, writer: PdfWriter, pages: Sequence[PageObject]) -> None:
        """
        Append copied pages to the output document.

        Raises:
            MergeCopyError: If a page cannot be inserted
        """
        try:
            for page in pages:
                writer.add_page(page)
        except Exception as e:
            raise MergeCopyError(name, cause=e) from e

    def serialize(self, name: str, writer: PdfWriter) -> bytes:
        """
        Write the output document to bytes.

        Raises:
            MergeError: If pypdf cannot write the document
        """
        buffer = io.BytesIO()
        try:
            writer.write(buffer)
        except Exception as e:
            raise MergeError(name, f"Could not write {name}", cause=e, code=ErrorCode.OUTPUT_WRITE_FAILED) from e
        finally:
            writer.close()
        return buffer.getvalue()
