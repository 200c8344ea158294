"""
Shared fixtures for the SnapPDF test suite.
"""

import os

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import fitz  # PyMuPDF
import pytest

from snappdf.core.models import InputDocument


def build_pdf(page_count: int, label: str = "Page") -> bytes:
    """Build an in-memory PDF whose pages read '<label> <n>'."""
    document = fitz.open()
    for number in range(1, page_count + 1):
        page = document.new_page(width=200, height=100)
        page.insert_text((20, 50), f"{label} {number}")
    data = document.tobytes()
    document.close()
    return data


@pytest.fixture
def make_pdf():
    """Factory fixture returning PDF bytes with the given number of pages."""
    return build_pdf


@pytest.fixture
def make_document():
    """Factory fixture returning an InputDocument backed by a real PDF."""

    def _make(name: str, page_count: int = 1) -> InputDocument:
        return InputDocument(name=name, data=build_pdf(page_count, label=name), media_type="application/pdf")

    return _make
