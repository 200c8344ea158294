"""
Centralized error taxonomy for SnapPDF.

This module provides the exception hierarchy used by the conversion and merge
orchestrators, input acceptance and the GUI, so every failure carries the
document and page context needed to show it verbatim to the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error type categories for consistent error handling."""

    VALIDATION = "validation"
    CONVERSION = "conversion"
    MERGE = "merge"
    PACKAGING = "packaging"
    SYSTEM = "system"


class ErrorCode(Enum):
    """Specific error codes for common scenarios."""

    # Input acceptance
    NOT_A_PDF = "NOT_A_PDF"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    INSUFFICIENT_INPUT = "INSUFFICIENT_INPUT"
    INVALID_INPUT = "INVALID_INPUT"

    # Conversion
    PAGE_RENDER_FAILED = "PAGE_RENDER_FAILED"
    NO_PAGES = "NO_PAGES"

    # Merge
    DOCUMENT_LOAD_FAILED = "DOCUMENT_LOAD_FAILED"
    PAGE_COPY_FAILED = "PAGE_COPY_FAILED"
    OUTPUT_WRITE_FAILED = "OUTPUT_WRITE_FAILED"

    # Packaging
    ARCHIVE_FAILED = "ARCHIVE_FAILED"

    # System
    OS_ERROR = "OS_ERROR"
    MEMORY_ERROR = "MEMORY_ERROR"
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class BaseAppError(Exception):
    """
    Base application error with structured metadata.

    The user message is what the GUI shows as the terminal state of a run;
    the technical message and context are for the log file.
    """

    type: ErrorType
    code: ErrorCode
    user_message: str
    technical_message: str | None = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type.value}, code={self.code.value}, message='{self.user_message}')"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "code": self.code.value,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "severity": self.severity.value,
            "context": self.context,
        }


def _describe(cause: BaseException | None) -> str | None:
    if cause is None:
        return None
    return f"{type(cause).__name__}: {cause}"


class InputValidationError(BaseAppError):
    """A file offered to the app is not an acceptable PDF candidate."""

    def __init__(
        self,
        file_name: str,
        user_message: str,
        code: ErrorCode = ErrorCode.NOT_A_PDF,
        technical_message: str | None = None,
    ):
        super().__init__(
            type=ErrorType.VALIDATION,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=ErrorSeverity.LOW,
            context={"file_name": file_name},
        )

    @property
    def file_name(self) -> str:
        return self.context["file_name"]


class InsufficientInputError(BaseAppError):
    """A run was requested with fewer documents than it needs."""

    def __init__(self, minimum: int, actual: int, operation: str = "merge"):
        super().__init__(
            type=ErrorType.VALIDATION,
            code=ErrorCode.INSUFFICIENT_INPUT,
            user_message=f"At least {minimum} PDF file(s) are required to {operation} (got {actual})",
            severity=ErrorSeverity.LOW,
            context={"minimum": minimum, "actual": actual, "operation": operation},
        )

    @property
    def minimum(self) -> int:
        return self.context["minimum"]


class ConversionError(BaseAppError):
    """A document in a conversion batch could not be turned into images."""

    def __init__(
        self,
        document_name: str,
        user_message: str,
        page_number: int | None = None,
        cause: BaseException | None = None,
        code: ErrorCode = ErrorCode.PAGE_RENDER_FAILED,
    ):
        super().__init__(
            type=ErrorType.CONVERSION,
            code=code,
            user_message=user_message,
            technical_message=_describe(cause),
            severity=ErrorSeverity.HIGH,
            context={"document_name": document_name, "page_number": page_number},
        )
        self.cause = cause

    @property
    def document_name(self) -> str:
        return self.context["document_name"]

    @property
    def page_number(self) -> int | None:
        return self.context["page_number"]


class PageRenderError(ConversionError):
    """One page of one document could not be rasterized."""

    def __init__(self, document_name: str, page_number: int, cause: BaseException | None = None):
        super().__init__(
            document_name=document_name,
            user_message=f"Failed to process page {page_number} of {document_name}",
            page_number=page_number,
            cause=cause,
        )


class PackagingError(BaseAppError):
    """The rendered pages could not be packed into an archive."""

    def __init__(self, user_message: str, path: str | None = None, cause: BaseException | None = None):
        super().__init__(
            type=ErrorType.PACKAGING,
            code=ErrorCode.ARCHIVE_FAILED,
            user_message=user_message,
            technical_message=_describe(cause),
            severity=ErrorSeverity.HIGH,
            context={"path": path},
        )
        self.cause = cause


class MergeError(BaseAppError):
    """A document in the merge list could not be used."""

    def __init__(
        self,
        document_name: str,
        user_message: str,
        cause: BaseException | None = None,
        code: ErrorCode = ErrorCode.DOCUMENT_LOAD_FAILED,
    ):
        super().__init__(
            type=ErrorType.MERGE,
            code=code,
            user_message=user_message,
            technical_message=_describe(cause),
            severity=ErrorSeverity.HIGH,
            context={"document_name": document_name},
        )
        self.cause = cause

    @property
    def document_name(self) -> str:
        return self.context["document_name"]


class DocumentLoadError(MergeError):
    """A PDF is unreadable or malformed."""

    def __init__(self, document_name: str, cause: BaseException | None = None):
        super().__init__(
            document_name=document_name,
            user_message=f"Could not open {document_name}: the file is not a readable PDF",
            cause=cause,
        )


class MergeCopyError(MergeError):
    """The pages of a loaded PDF could not be copied into the output."""

    def __init__(self, document_name: str, cause: BaseException | None = None):
        super().__init__(
            document_name=document_name,
            user_message=f"Could not copy the pages of {document_name}",
            cause=cause,
            code=ErrorCode.PAGE_COPY_FAILED,
        )


class SystemAppError(BaseAppError):
    """Operating system and unexpected runtime errors."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=ErrorSeverity.HIGH,
            context=context or {},
        )


# Built-in exception -> (code, default message)
_EXCEPTION_MAPPING: dict[type[Exception], tuple[ErrorCode, str]] = {
    FileNotFoundError: (ErrorCode.FILE_NOT_FOUND, "File not found"),
    PermissionError: (ErrorCode.FILE_UNREADABLE, "Permission denied"),
    OSError: (ErrorCode.OS_ERROR, "System error occurred"),
    MemoryError: (ErrorCode.MEMORY_ERROR, "Insufficient memory"),
}


def from_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Convert any exception to a BaseAppError.

    Args:
        exc: The exception to convert
        context: Optional context information merged into the error

    Returns:
        BaseAppError instance (``exc`` itself when it already is one)
    """
    context = context or {}

    if isinstance(exc, BaseAppError):
        exc.context.update({k: v for k, v in context.items() if k not in exc.context})
        return exc

    exc_type = type(exc)
    technical = f"{exc_type.__name__}: {exc}"
    if exc_type in _EXCEPTION_MAPPING:
        code, default_message = _EXCEPTION_MAPPING[exc_type]
        return SystemAppError(
            code=code, user_message=str(exc) or default_message, technical_message=technical, context=context
        )

    if isinstance(exc, ValueError):
        return BaseAppError(
            type=ErrorType.VALIDATION,
            code=ErrorCode.INVALID_INPUT,
            user_message=str(exc) or "Invalid input provided",
            technical_message=technical,
            context=context,
        )

    logger.warning(f"Unknown exception type: {exc_type.__name__}: {exc}")
    return SystemAppError(
        code=ErrorCode.UNKNOWN,
        user_message="An unexpected error occurred",
        technical_message=technical,
        context=context,
    )
