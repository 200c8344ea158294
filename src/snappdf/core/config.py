"""
Configuration defaults for SnapPDF.

This module provides the settings schema, defaults and the application
directories used for settings and logs.
"""

from pathlib import Path
from typing import Any

from PySide6.QtCore import QCoreApplication, QStandardPaths

# Application identifiers for QSettings
APP_ORGANIZATION = "SnapPDF"
APP_NAME = "SnapPDF"

# Rasterization zoom limits relative to the page's nominal size
MIN_SCALE_FACTOR = 0.5
MAX_SCALE_FACTOR = 8.0

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Default configuration; the type of each default is the expected type
DEFAULT_CONFIG: dict[str, Any] = {
    # Conversion settings
    "scale_factor": 2.0,
    "archive_compression": "deflated",  # Options: "deflated", "stored"
    # Debug settings
    "log_level": "INFO",
    # UI state
    "last_open_dir": "",
    "last_save_dir": "",
}


def get_app_data_dir() -> Path:
    """
    Get the writable application data directory.

    Falls back to the config location when no app data location exists.
    """
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if location:
        return Path(location)
    config_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.ConfigLocation)
    return Path(config_location) / APP_ORGANIZATION / APP_NAME


def get_logs_dir() -> Path:
    return get_app_data_dir() / "logs"


def get_default_open_dir() -> str:
    """
    Get the default directory for file dialogs.

    Returns:
        Path to the user's Documents directory, or current working directory as fallback
    """
    docs_dir = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.DocumentsLocation)
    if docs_dir and Path(docs_dir).exists():
        return docs_dir
    return str(Path.cwd())


def setup_qsettings() -> None:
    """
    Configure QSettings with application identifiers.

    Call this early in application startup so QSettings and QStandardPaths
    resolve to this application's locations.
    """
    QCoreApplication.setOrganizationName(APP_ORGANIZATION)
    QCoreApplication.setApplicationName(APP_NAME)
