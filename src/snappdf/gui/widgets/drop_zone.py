"""
Drag-and-drop widget for PDF file selection.
"""

from PySide6.QtCore import QSize, Qt, QTimer, Signal
from PySide6.QtGui import QDragEnterEvent, QDragLeaveEvent, QDragMoveEvent, QDropEvent, QMouseEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

from snappdf.core.pdf_utils import extract_local_paths_from_mimedata

IDLE_TEXT = "📄 Drop PDF files or click to upload"
BUSY_TEXT = "Converting..."


class DropZone(QLabel):
    """
    Label accepting one or more dropped files.

    Dropped local files are handed on through ``filesDropped``; deciding which
    of them are PDFs is left to the receiver.
    """

    filesDropped = Signal(list)  # list[str] of local paths, in drop order
    filesRejected = Signal(str)  # user-visible message
    clicked = Signal()

    STATE_NORMAL = "normal"
    STATE_HOVER = "hover"
    STATE_REJECT = "reject"

    _STYLES = {
        STATE_NORMAL: "border: 2px dashed palette(mid); background-color: rgba(128, 128, 128, 20);",
        STATE_HOVER: "border: 2px dashed palette(highlight); background-color: rgba(0, 120, 212, 30);",
        STATE_REJECT: "border: 2px dashed #d32f2f; background-color: rgba(211, 47, 47, 20); color: #d32f2f;",
    }

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._current_state = self.STATE_NORMAL
        self._busy = False
        self._busy_text = BUSY_TEXT

        self.setAcceptDrops(True)
        self.setObjectName("dropZone")
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.setMinimumHeight(120)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setAccessibleName("PDF file drop zone")
        self.setToolTip("Drop PDF files here. Only PDF files are accepted.")
        self._update_appearance()
        self.setText(IDLE_TEXT)

    def _update_appearance(self) -> None:
        style = self._STYLES[self._current_state]
        self.setStyleSheet(f"QLabel#dropZone {{ {style} border-radius: 12px; padding: 24px; font-size: 14px; }}")

    def _set_state(self, state: str) -> None:
        if self._current_state != state:
            self._current_state = state
            self._update_appearance()

    def _reset_to_normal_delayed(self) -> None:
        QTimer.singleShot(3000, self._reset_to_normal)

    def _reset_to_normal(self) -> None:
        self._set_state(self.STATE_NORMAL)
        self.setText(self._busy_text if self._busy else IDLE_TEXT)

    # Drag and drop event handlers

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if event.mimeData().hasUrls() and not self._busy:
            event.acceptProposedAction()
            self._set_state(self.STATE_HOVER)
            self.setText("📄 Drop PDF anywhere")
            return
        event.ignore()

    def dragMoveEvent(self, event: QDragMoveEvent) -> None:
        if event.mimeData().hasUrls() and not self._busy:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragLeaveEvent(self, event: QDragLeaveEvent) -> None:
        self._reset_to_normal()
        event.accept()

    def dropEvent(self, event: QDropEvent) -> None:
        try:
            paths = extract_local_paths_from_mimedata(event.mimeData())
        except ValueError as e:
            self.show_error(str(e))
            event.ignore()
            return

        if not paths:
            self.show_error("Please upload a valid PDF file")
            event.ignore()
            return

        self._reset_to_normal()
        self.filesDropped.emit([str(path) for path in paths])
        event.acceptProposedAction()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton and not self._busy:
            self.clicked.emit()
        super().mouseReleaseEvent(event)

    # Public methods for external control

    def show_error(self, message: str) -> None:
        self._set_state(self.STATE_REJECT)
        self.setText(f"❌ {message}")
        self.filesRejected.emit(message)
        self._reset_to_normal_delayed()

    def set_busy(self, busy: bool, text: str = BUSY_TEXT) -> None:
        """Show ``text`` and ignore drops while a run is active."""
        self._busy = busy
        self._busy_text = text
        self._set_state(self.STATE_NORMAL)
        self.setText(text if busy else IDLE_TEXT)

    def sizeHint(self) -> QSize:
        return QSize(400, 160)
