"""
File handling functionality for the main window.

This module contains methods for accepting PDF files from the file dialog or
the drop zone and keeping the pending list of the active mode up to date.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog

from snappdf.core.batch_state import BatchMode
from snappdf.core.pdf_utils import collect_pdf_documents

if TYPE_CHECKING:
    from snappdf.gui.main_window import MainWindow


class FileHandler:
    """Handles file-related operations for the main window."""

    def __init__(self, main_window: "MainWindow") -> None:
        self.main_window = main_window
        self._logger = logging.getLogger(__name__)

    def on_browse_clicked(self) -> None:
        """Open a file dialog and add the selected PDFs."""
        if self.main_window.batch_state.is_processing:
            return

        last_dir = self.main_window.config_manager.last_dir("last_open_dir")
        file_paths, _ = QFileDialog.getOpenFileNames(
            self.main_window, "Select PDF Files", last_dir, "PDF Files (*.pdf);;All Files (*)"
        )

        if file_paths:
            self.main_window.config_manager.set("last_open_dir", str(Path(file_paths[0]).parent))
            self.add_files(file_paths)

    def on_files_dropped(self, file_paths: list[str]) -> None:
        self.add_files(file_paths)

    def add_files(self, file_paths: list[str]) -> int:
        """
        Validate files and add the accepted ones to the pending list.

        Returns:
            Number of files added
        """
        window = self.main_window
        if window.batch_state.is_processing:
            self._logger.warning("Ignoring files added while a run is in progress")
            return 0

        documents, rejections = collect_pdf_documents(file_paths)

        if rejections:
            message = "; ".join(error.user_message for error in rejections)
            window.drop_zone.show_error(message if len(rejections) == 1 else "Please upload valid PDF files")
            window.set_status_message(message, error=True)

        if not documents:
            return 0

        if window.mode is BatchMode.MERGE:
            window.merge_queue.extend(documents)
        else:
            window.convert_documents.extend(documents)

        self._logger.info(f"Added {len(documents)} PDF file(s): {', '.join(d.name for d in documents)}")
        if not rejections:
            window.set_status_message(f"{len(documents)} PDF file(s) added")
        window.refresh_document_list()
        return len(documents)

    def on_remove_clicked(self) -> None:
        window = self.main_window
        row = window.document_list.currentRow()
        if row < 0 or window.batch_state.is_processing:
            return

        if window.mode is BatchMode.MERGE:
            window.merge_queue.remove(row)
        elif row < len(window.convert_documents):
            del window.convert_documents[row]
        window.refresh_document_list()

    def on_clear_clicked(self) -> None:
        window = self.main_window
        if window.batch_state.is_processing:
            return

        if window.mode is BatchMode.MERGE:
            window.merge_queue.clear()
        else:
            window.convert_documents.clear()
        window.batch_state.reset()
        window.refresh_document_list()

    def on_item_moved(self, from_index: int, to_index: int) -> None:
        """Apply a drag reorder of the merge list."""
        window = self.main_window
        if window.mode is not BatchMode.MERGE or window.batch_state.is_processing:
            window.refresh_document_list()
            return

        window.merge_queue.reorder(from_index, to_index)
        self._logger.debug(f"Moved merge item {from_index} -> {to_index}")
        window.refresh_document_list()
