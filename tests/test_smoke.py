"""
Smoke tests for the SnapPDF application.
These tests verify basic functionality and environment setup.
"""

import os
import sys

# Set offscreen platform to prevent display errors on headless systems
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def test_pyside6_imports():
    """Test that PySide6 can be imported successfully."""
    import PySide6  # noqa: F401
    from PySide6.QtWidgets import QApplication  # noqa: F401


def test_pdf_libraries_import():
    """Test that the PDF backends can be imported."""
    import fitz  # noqa: F401
    import pypdf  # noqa: F401


def test_main_module_components():
    """Test individual components from the main module."""
    from PySide6.QtWidgets import QApplication

    from snappdf.gui import main

    # Ensure QApplication exists
    app = QApplication.instance() or QApplication(sys.argv)  # noqa: F841

    assert callable(main.main)
