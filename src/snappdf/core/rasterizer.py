"""
Page rasterization using PyMuPDF.
"""

from __future__ import annotations

import logging

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

DEFAULT_SCALE_FACTOR = 2.0


class RenderFailure(RuntimeError):
    """A page could not be rasterized. ``page_index`` is 0-based."""

    def __init__(self, page_index: int, message: str) -> None:
        super().__init__(f"Failed to render page index {page_index}: {message}")
        self.page_index = page_index


class PageRasterizer:
    """
    Render PDF pages to PNG images.

    The most recently opened document stays open so rendering the pages of
    one document in sequence parses it only once. Call ``close()`` when done.
    """

    def __init__(self, default_scale: float = DEFAULT_SCALE_FACTOR) -> None:
        self.default_scale = default_scale
        self._source: bytes | None = None
        self._document: fitz.Document | None = None

    def _open(self, pdf_bytes: bytes) -> fitz.Document:
        if self._document is not None and self._source is pdf_bytes:
            return self._document

        self.close()
        document = fitz.open(stream=pdf_bytes, filetype="pdf")
        if document.needs_pass and not document.authenticate(""):
            document.close()
            raise ValueError("Document is encrypted")

        self._source = pdf_bytes
        self._document = document
        return document

    def count_pages(self, pdf_bytes: bytes) -> int:
        """
        Get the number of pages of a PDF.

        Raises:
            Whatever PyMuPDF raises for unreadable data, or ValueError for
            encrypted documents
        """
        return self._open(pdf_bytes).page_count

    def render(self, pdf_bytes: bytes, page_index: int, scale_factor: float | None = None) -> bytes:
        """
        Render one page to PNG bytes.

        Args:
            pdf_bytes: The PDF document
            page_index: 0-based page index
            scale_factor: Zoom relative to the page's nominal size (default 2x)

        Returns:
            PNG encoded image bytes

        Raises:
            RenderFailure: If the page cannot be rendered
        """
        scale = scale_factor if scale_factor is not None else self.default_scale
        document = self._open(pdf_bytes)

        if not 0 <= page_index < document.page_count:
            raise RenderFailure(page_index, f"document has {document.page_count} page(s)")

        try:
            page = document.load_page(page_index)
            pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            return pixmap.tobytes("png")
        except Exception as e:
            raise RenderFailure(page_index, str(e)) from e

    def close(self) -> None:
        """Close the cached document, if any."""
        if self._document is not None:
            self._document.close()
        self._document = None
        self._source = None
