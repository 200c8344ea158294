"""
Main window for the SnapPDF application.

The window offers two modes sharing one pending file list: converting PDFs to
PNG images and merging PDFs into one document. It renders the BatchState of
the current run and exposes its artifact through a single Save button.
"""

import logging

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from snappdf.core.batch_state import BatchMode, BatchState, RunState
from snappdf.core.config_manager import ConfigManager
from snappdf.core.conversion import ConversionOrchestrator
from snappdf.core.error_handler import get_error_handler
from snappdf.core.errors import BaseAppError
from snappdf.core.merge import MergeOrchestrator, MergeQueue
from snappdf.core.models import ConversionItem, InputDocument, ItemStatus, OutputArtifact
from snappdf.core.packer import ArchivePacker
from snappdf.core.rasterizer import PageRasterizer
from snappdf.core.threading import RunController
from snappdf.gui.handlers.file_handler import FileHandler
from snappdf.gui.handlers.output_handler import OutputHandler
from snappdf.gui.widgets import DocumentList, DropZone

RUN_LABELS = {BatchMode.CONVERT: "Convert to PNG", BatchMode.MERGE: "Merge PDFs"}
BUSY_VERBS = {BatchMode.CONVERT: "Converting", BatchMode.MERGE: "Merging"}
STATUS_BAR_TIMEOUT_MS = 5000


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, config_manager: ConfigManager | None = None) -> None:
        super().__init__()
        self.setWindowTitle("SnapPDF")
        self._logger = logging.getLogger(__name__)

        self.config_manager = config_manager or ConfigManager()
        self.mode = BatchMode.CONVERT
        self.convert_documents: list[InputDocument] = []
        self.merge_queue = MergeQueue()

        self.batch_state = BatchState(self)
        self.controller = RunController(self.batch_state, self)

        self._build_ui()

        self.file_handler = FileHandler(self)
        self.output_handler = OutputHandler(self)

        self._connect_signals()
        self.refresh_document_list()

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        mode_row = QHBoxLayout()
        self.convert_radio = QRadioButton("Convert to PNG")
        self.merge_radio = QRadioButton("Merge PDFs")
        self.convert_radio.setChecked(True)
        self.mode_group = QButtonGroup(self)
        self.mode_group.addButton(self.convert_radio)
        self.mode_group.addButton(self.merge_radio)
        mode_row.addWidget(self.convert_radio)
        mode_row.addWidget(self.merge_radio)
        mode_row.addStretch()
        layout.addLayout(mode_row)

        self.drop_zone = DropZone(central)
        layout.addWidget(self.drop_zone)

        self.document_list = DocumentList(central)
        layout.addWidget(self.document_list)

        button_row = QHBoxLayout()
        self.browse_button = QPushButton("Browse...")
        self.remove_button = QPushButton("Remove")
        self.clear_button = QPushButton("Clear")
        self.run_button = QPushButton(RUN_LABELS[self.mode])
        self.save_button = QPushButton("Download")
        for button in (self.browse_button, self.remove_button, self.clear_button):
            button_row.addWidget(button)
        button_row.addStretch()
        button_row.addWidget(self.run_button)
        button_row.addWidget(self.save_button)
        layout.addLayout(button_row)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        self.setCentralWidget(central)
        self.resize(640, 520)

    def _connect_signals(self) -> None:
        self.convert_radio.toggled.connect(self._on_mode_toggled)

        self.drop_zone.filesDropped.connect(self.file_handler.on_files_dropped)
        self.drop_zone.clicked.connect(self.file_handler.on_browse_clicked)
        self.browse_button.clicked.connect(self.file_handler.on_browse_clicked)
        self.remove_button.clicked.connect(self.file_handler.on_remove_clicked)
        self.clear_button.clicked.connect(self.file_handler.on_clear_clicked)
        self.document_list.itemMoved.connect(self.file_handler.on_item_moved)
        self.document_list.currentRowChanged.connect(lambda _row: self._update_buttons())

        self.run_button.clicked.connect(self.on_run_clicked)
        self.save_button.clicked.connect(self.output_handler.on_save_clicked)

        self.batch_state.stateChanged.connect(self._on_state_changed)
        self.batch_state.itemUpdated.connect(self._on_item_updated)
        self.batch_state.artifactReady.connect(self._on_artifact_ready)
        self.batch_state.runFailed.connect(self._on_run_failed)
        self.controller.logMessage.connect(self._on_log_message)
        get_error_handler().errorOccurred.connect(self._on_error_occurred)

    # Mode and list management

    def _on_mode_toggled(self, convert_checked: bool) -> None:
        self.set_mode(BatchMode.CONVERT if convert_checked else BatchMode.MERGE)

    def set_mode(self, mode: BatchMode) -> None:
        if mode is self.mode:
            return
        if self.batch_state.is_processing:
            self._logger.warning("Cannot switch mode while a run is in progress")
            return

        self.mode = mode
        self.convert_radio.setChecked(mode is BatchMode.CONVERT)
        self.merge_radio.setChecked(mode is BatchMode.MERGE)
        self.document_list.set_reorderable(mode is BatchMode.MERGE)
        self.run_button.setText(RUN_LABELS[mode])
        self.set_status_message("")
        self.refresh_document_list()

    def pending_names(self) -> list[str]:
        if self.mode is BatchMode.MERGE:
            return [document.name for document in self.merge_queue.documents]
        return [document.name for document in self.convert_documents]

    def refresh_document_list(self) -> None:
        self.document_list.set_documents(self.pending_names())
        self._update_buttons()

    def can_run(self) -> bool:
        if self.batch_state.is_processing:
            return False
        if self.mode is BatchMode.MERGE:
            return self.merge_queue.can_merge
        return bool(self.convert_documents)

    def _update_buttons(self) -> None:
        processing = self.batch_state.is_processing
        has_items = self.document_list.count() > 0
        self.run_button.setEnabled(self.can_run())
        self.save_button.setEnabled(self.batch_state.artifact is not None and not processing)
        self.browse_button.setEnabled(not processing)
        self.clear_button.setEnabled(has_items and not processing)
        self.remove_button.setEnabled(self.document_list.currentRow() >= 0 and not processing)
        self.convert_radio.setEnabled(not processing)
        self.merge_radio.setEnabled(not processing)

    def set_status_message(self, message: str, error: bool = False) -> None:
        self.status_label.setText(message)
        self.status_label.setStyleSheet("color: #d32f2f;" if error else "")

    # Runs

    def on_run_clicked(self) -> None:
        if not self.can_run():
            return

        if self.mode is BatchMode.MERGE:
            self.merge_queue.freeze()
            started = self.controller.start_merge(self.merge_queue.items, MergeOrchestrator())
            if not started:
                self.merge_queue.thaw()
            return

        orchestrator = ConversionOrchestrator(
            rasterizer=PageRasterizer(),
            packer=ArchivePacker(self.config_manager.archive_compression()),
            scale_factor=self.config_manager.scale_factor(),
        )
        self.controller.start_conversion(self.convert_documents, orchestrator)

    def _on_state_changed(self, state: RunState) -> None:
        processing = state is RunState.PROCESSING
        verb = BUSY_VERBS[self.batch_state.mode or self.mode]
        self.drop_zone.set_busy(processing, f"{verb}...")
        if processing:
            self.set_status_message(f"{verb} {len(self.batch_state.items)} file(s)...")
            for index in range(self.document_list.count()):
                self.document_list.set_status(index, ItemStatus.PENDING)
        else:
            self.merge_queue.thaw()
        if state is RunState.IDLE:
            self.save_button.setText("Download")
        self._update_buttons()

    def _on_item_updated(self, index: int, item: object) -> None:
        if isinstance(item, ConversionItem):
            self.document_list.set_status(index, item.status, item.error_detail)
        else:
            self.document_list.set_status(index, ItemStatus.CONVERTED)

    def _on_artifact_ready(self, artifact: OutputArtifact) -> None:
        self.save_button.setText(f"Download {artifact.suggested_file_name}")
        self.set_status_message(f"Ready: {artifact.suggested_file_name}")
        self._update_buttons()

    def _on_run_failed(self, message: str) -> None:
        self.save_button.setText("Download")
        self.set_status_message(f"Error: {message}", error=True)
        self._update_buttons()

    def _on_log_message(self, level: str, message: str) -> None:
        self.statusBar().showMessage(f"{level}: {message}", STATUS_BAR_TIMEOUT_MS)

    def _on_error_occurred(self, app_error: BaseAppError) -> None:
        self.set_status_message(get_error_handler().to_user_message(app_error), error=True)

    def closeEvent(self, event: QCloseEvent) -> None:
        try:
            get_error_handler().errorOccurred.disconnect(self._on_error_occurred)
        except (RuntimeError, TypeError):
            self._logger.debug("Error handler already disconnected")
        self.controller.shutdown()
        super().closeEvent(event)
