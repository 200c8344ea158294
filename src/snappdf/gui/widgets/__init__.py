"""
Reusable GUI widgets for the SnapPDF application.
"""

from .document_list import DocumentList
from .drop_zone import DropZone

__all__ = ["DocumentList", "DropZone"]
