"""
PDF input acceptance and QMimeData parsing utilities.

This module decides which files are accepted as PDF candidates and turns them
into in-memory InputDocuments for a conversion or merge run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import unquote

from PySide6.QtCore import QMimeData, QMimeDatabase

from .errors import ErrorCode, InputValidationError
from .models import InputDocument

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
PDF_SUFFIX = ".pdf"


def is_pdf_candidate(name: str, media_type: str | None = None) -> bool:
    """
    Check whether a file is accepted as a PDF.

    A file qualifies if its declared media type is ``application/pdf`` or if
    its lowercased name ends with ``.pdf``. The suffix clause covers sources
    that do not report a media type.
    """
    return media_type == PDF_MEDIA_TYPE or name.lower().endswith(PDF_SUFFIX)


def base_name(name: str) -> str:
    """
    Derive the output base name of a document.

    Only a literal, case-sensitive trailing ``.pdf`` is stripped, so
    ``Report.PDF`` stays ``Report.PDF``.
    """
    if name.endswith(PDF_SUFFIX):
        return name[: -len(PDF_SUFFIX)]
    return name


def detect_media_type(path: Path) -> str:
    """
    Get the declared media type of a local file.

    Returns an empty string if the MIME database cannot classify it.
    """
    try:
        mime_type = QMimeDatabase().mimeTypeForFile(str(path))
    except Exception as e:
        logger.debug(f"MIME detection failed for {path}: {e}")
        return ""
    if not mime_type.isValid() or mime_type.isDefault():
        return ""
    return mime_type.name()


def load_input_document(path: Path | str) -> InputDocument:
    """
    Read a local file into an InputDocument.

    Raises:
        InputValidationError: If the file is missing, not a regular file,
            not a PDF candidate or cannot be read
    """
    path = Path(path)
    if not path.exists():
        raise InputValidationError(path.name, f"File not found: {path.name}", code=ErrorCode.FILE_NOT_FOUND)
    if not path.is_file():
        raise InputValidationError(path.name, f"Not a file: {path.name}", code=ErrorCode.INVALID_INPUT)

    media_type = detect_media_type(path)
    if not is_pdf_candidate(path.name, media_type):
        detected = media_type or (path.suffix.lower() if path.suffix else "unknown type")
        raise InputValidationError(
            path.name, f"{path.name} is not a PDF (detected: {detected}). Please upload a valid PDF file."
        )

    try:
        data = path.read_bytes()
    except OSError as e:
        raise InputValidationError(
            path.name,
            f"Cannot read {path.name}",
            code=ErrorCode.FILE_UNREADABLE,
            technical_message=f"{type(e).__name__}: {e}",
        ) from e

    return InputDocument(name=path.name, data=data, media_type=media_type)


def collect_pdf_documents(
    paths: Iterable[Path | str],
) -> tuple[list[InputDocument], list[InputValidationError]]:
    """
    Accept a batch of local files.

    Rejected files are reported individually and do not prevent the other
    files from being accepted.

    Returns:
        Tuple of (accepted documents in input order, rejections)
    """
    documents: list[InputDocument] = []
    rejections: list[InputValidationError] = []

    for path in paths:
        try:
            documents.append(load_input_document(path))
        except InputValidationError as e:
            logger.warning(f"File rejected: {e}")
            rejections.append(e)

    return documents, rejections


def extract_local_paths_from_mimedata(mime: QMimeData) -> list[Path]:
    """
    Extract local file paths from a QMimeData object.

    Handles URL decoding, deduplication, and filters out non-local URLs and
    directories. Input order is preserved.

    Raises:
        ValueError: If the mime data doesn't contain URLs
    """
    if not mime.hasUrls():
        raise ValueError("QMimeData does not contain URLs")

    paths: list[Path] = []
    seen: set[str] = set()

    for url in mime.urls():
        if not url.isLocalFile():
            continue

        try:
            path = Path(unquote(url.toLocalFile())).resolve()
            if path.is_dir() or not path.exists():
                continue
        except (OSError, ValueError):
            continue

        key = str(path)
        if key not in seen:
            seen.add(key)
            paths.append(path)

    return paths
