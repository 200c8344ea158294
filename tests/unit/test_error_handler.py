"""
Tests for the error handler and logging setup.
"""

import logging
import logging.handlers
import sys

import pytest

from snappdf.core.error_handler import LOG_FILE_NAME, get_error_handler, init_logging
from snappdf.core.errors import ErrorCode, PageRenderError


@pytest.fixture
def handler(qtbot):
    handler = get_error_handler()
    yield handler
    handler.restore_hooks()


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(saved_level)


class TestErrorHandler:
    def test_singleton(self, handler):
        assert get_error_handler() is handler

    def test_handle_emits_and_logs(self, qtbot, handler, caplog):
        error = PageRenderError("b.pdf", 2)

        with qtbot.waitSignal(handler.errorOccurred) as blocker:
            with caplog.at_level(logging.ERROR, logger="snappdf.errors"):
                result = handler.handle(error)

        assert result is error
        assert blocker.args == [error]
        assert "[PAGE_RENDER_FAILED] Failed to process page 2 of b.pdf" in caplog.text
        assert handler.to_user_message(result) == "Failed to process page 2 of b.pdf"

    def test_capture_builtin_exception(self, handler):
        try:
            raise PermissionError("denied")
        except PermissionError as e:
            app_error = handler.capture(e, {"path": "/tmp/x.pdf"})

        assert app_error.code == ErrorCode.FILE_UNREADABLE
        assert app_error.context["path"] == "/tmp/x.pdf"
        assert "PermissionError" in app_error.context["traceback"]

    def test_context_sanitized(self, handler):
        app_error = handler.capture(
            ValueError("x"), {"api_token": "abc", "data": b"\x00" * 10, "note": "n" * 500}
        )

        assert app_error.context["api_token"] == "[REDACTED]"
        assert app_error.context["data"] == "<10 bytes>"
        assert len(app_error.context["note"]) == 203

    def test_install_and_restore_hooks(self, handler):
        original = sys.excepthook
        handler.install_hooks()
        assert sys.excepthook is not original

        handler.restore_hooks()
        assert sys.excepthook is handler._original_excepthook


class TestInitLogging:
    def test_creates_rotating_file(self, tmp_path, clean_root_logger):
        log_file = init_logging("DEBUG", log_dir=tmp_path)

        assert log_file == tmp_path / LOG_FILE_NAME
        assert clean_root_logger.level == logging.DEBUG
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in clean_root_logger.handlers)

    def test_idempotent(self, tmp_path, clean_root_logger):
        first = init_logging(log_dir=tmp_path)
        count = len(clean_root_logger.handlers)

        second = init_logging(log_dir=tmp_path / "other")

        assert second == first
        assert len(clean_root_logger.handlers) == count
