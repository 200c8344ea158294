"""
Centralized error handling and logging infrastructure for SnapPDF.

This module provides a singleton ErrorHandler that captures, logs and
normalizes exceptions, plus the application's logging setup.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import threading
import traceback
from pathlib import Path
from typing import Any, ClassVar

from PySide6.QtCore import QObject, Signal

from .config import get_logs_dir
from .errors import BaseAppError, from_exception

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "snappdf.log"
LOG_MAX_BYTES = 5_242_880  # 5MB
LOG_BACKUP_COUNT = 5

_SENSITIVE_KEYS = ("password", "token", "secret")


class ErrorHandler(QObject):
    """
    Centralized error handler.

    Normalizes exceptions into BaseAppError, logs them with their error code
    and emits ``errorOccurred`` for UI components.
    """

    errorOccurred = Signal(object)  # BaseAppError

    _instance: ClassVar[ErrorHandler | None] = None

    def __new__(cls) -> ErrorHandler:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return

        super().__init__()
        self._initialized = True
        self._logger = logging.getLogger("snappdf.errors")
        self._original_excepthook = sys.excepthook
        self._original_threading_excepthook = threading.excepthook

    def capture(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Normalize an exception into a BaseAppError without logging it.

        Args:
            exception: The exception to capture
            context: Optional context information
        """
        app_error = from_exception(exception, self._sanitize_context(context or {}))

        if not app_error.technical_message:
            app_error.technical_message = f"{type(exception).__name__}: {exception}"

        if "traceback" not in app_error.context:
            app_error.context["traceback"] = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        return app_error

    def handle(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Capture, log and broadcast an exception.

        Returns:
            The normalized BaseAppError
        """
        app_error = self.capture(exception, context)

        self._logger.error(
            f"[{app_error.code.value}] {app_error.user_message}",
            extra={"app_code": app_error.code.value, "error_type": app_error.type.value},
            exc_info=exception,
        )

        self.errorOccurred.emit(app_error)
        return app_error

    def to_user_message(self, app_error: BaseAppError) -> str:
        """Get the message to show for an error; page context is kept verbatim."""
        return app_error.user_message

    def _sanitize_context(self, context: dict[str, Any]) -> dict[str, Any]:
        """Redact sensitive keys and drop raw binary payloads."""
        safe_context: dict[str, Any] = {}
        for key, value in context.items():
            if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
                safe_context[key] = "[REDACTED]"
            elif isinstance(value, bytes | bytearray):
                safe_context[key] = f"<{len(value)} bytes>"
            elif isinstance(value, str) and len(value) > 200:
                safe_context[key] = value[:200] + "..."
            else:
                safe_context[key] = value
        return safe_context

    def install_hooks(self) -> None:
        """Route unhandled exceptions, including those of worker threads, through ``handle``."""

        def exception_hook(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
            if issubclass(exc_type, KeyboardInterrupt) or not isinstance(exc_value, Exception):
                self._original_excepthook(exc_type, exc_value, exc_traceback)
                return
            self.handle(exc_value, {"source": "sys.excepthook"})

        def threading_exception_hook(args: threading.ExceptHookArgs) -> None:
            if not isinstance(args.exc_value, Exception):
                self._original_threading_excepthook(args)
                return
            thread_name = args.thread.name if args.thread else "unknown"
            self.handle(args.exc_value, {"source": "threading.excepthook", "thread": thread_name})

        sys.excepthook = exception_hook
        threading.excepthook = threading_exception_hook

    def restore_hooks(self) -> None:
        sys.excepthook = self._original_excepthook
        threading.excepthook = self._original_threading_excepthook


def get_error_handler() -> ErrorHandler:
    """Get the singleton ErrorHandler instance."""
    return ErrorHandler()


class _ErrorCodeFilter(logging.Filter):
    """Give every record an ``app_code`` so the shared format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "app_code"):
            record.app_code = "-"
        return True


def init_logging(level: str = "INFO", log_dir: Path | None = None) -> Path | None:
    """
    Configure application logging.

    Logs go to stderr and to a rotating file in the app data directory.

    Args:
        level: Root log level name
        log_dir: Directory for the log file (default: platform app data logs dir)

    Returns:
        The log file path, or None if file logging could not be set up
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT + " | code=%(app_code)s", datefmt=LOG_DATE_FORMAT)
    code_filter = _ErrorCodeFilter()

    if not any(getattr(h, "_snappdf", False) for h in root.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.addFilter(code_filter)
        console_handler._snappdf = True  # type: ignore[attr-defined]
        root.addHandler(console_handler)

        try:
            log_dir = log_dir or get_logs_dir()
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / LOG_FILE_NAME
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
            )
        except OSError as e:
            logging.getLogger(__name__).error(f"Failed to set up file logging: {e}")
            return None

        file_handler.setFormatter(formatter)
        file_handler.addFilter(code_filter)
        file_handler._snappdf = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)
        return log_file

    for handler in root.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler) and getattr(handler, "_snappdf", False):
            return Path(handler.baseFilename)
    return None


def setup_error_handling() -> ErrorHandler:
    """Create the ErrorHandler and install the exception hooks."""
    handler = get_error_handler()
    handler.install_hooks()
    return handler
