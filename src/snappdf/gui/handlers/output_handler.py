"""
Artifact download functionality for the main window.

The core only hands over bytes and a suggested file name; this handler lets
the user pick where to save them.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog, QMessageBox

from snappdf.core.models import ArtifactKind, OutputArtifact

if TYPE_CHECKING:
    from snappdf.gui.main_window import MainWindow

FILE_FILTERS = {
    ArtifactKind.PNG: "PNG Images (*.png)",
    ArtifactKind.ZIP: "ZIP Archives (*.zip)",
    ArtifactKind.PDF: "PDF Files (*.pdf)",
}


def write_artifact(artifact: OutputArtifact, path: Path) -> Path:
    """Write an artifact's bytes to ``path`` and return it."""
    path.write_bytes(artifact.data)
    return path


class OutputHandler:
    """Handles saving the artifact of the last run."""

    def __init__(self, main_window: "MainWindow") -> None:
        self.main_window = main_window
        self._logger = logging.getLogger(__name__)

    def on_save_clicked(self) -> None:
        artifact = self.main_window.batch_state.artifact
        if artifact is None:
            return

        save_dir = self.main_window.config_manager.last_dir("last_save_dir")
        file_path, _ = QFileDialog.getSaveFileName(
            self.main_window,
            f"Download {artifact.suggested_file_name}",
            str(Path(save_dir) / artifact.suggested_file_name),
            f"{FILE_FILTERS[artifact.kind]};;All Files (*)",
        )
        if file_path:
            self.save_to(Path(file_path))

    def save_to(self, path: Path) -> bool:
        """Save the current artifact to ``path``; errors are shown, not raised."""
        artifact = self.main_window.batch_state.artifact
        if artifact is None:
            return False

        try:
            write_artifact(artifact, path)
        except OSError as e:
            self._logger.error(f"Failed to save {path}: {e}")
            QMessageBox.warning(self.main_window, "Save Failed", f"Could not save {path.name}: {e}")
            return False

        self.main_window.config_manager.set("last_save_dir", str(path.parent))
        self._logger.info(f"Saved {artifact.suggested_file_name} to {path}")
        self.main_window.set_status_message(f"Saved {path.name}")
        return True
