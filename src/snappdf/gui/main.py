"""
Main entry point for the SnapPDF application.
"""

import logging
import sys

from PySide6.QtWidgets import QApplication

from snappdf.core.config import setup_qsettings
from snappdf.core.config_manager import ConfigManager
from snappdf.core.error_handler import init_logging, setup_error_handling
from snappdf.gui.main_window import MainWindow


def main() -> int:
    """Main application entry point."""
    app = QApplication(sys.argv)
    setup_qsettings()

    config_manager = ConfigManager()
    log_file = init_logging(config_manager.log_level())
    setup_error_handling()
    logging.getLogger(__name__).info(f"SnapPDF starting (log file: {log_file})")

    window = MainWindow(config_manager)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
