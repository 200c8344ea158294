"""
Configuration manager for SnapPDF.

Provides QSettings-backed settings with default fallbacks and type coercion.
"""

import logging
from typing import Any

from PySide6.QtCore import QSettings

from .config import (
    DEFAULT_CONFIG,
    LOG_LEVELS,
    MAX_SCALE_FACTOR,
    MIN_SCALE_FACTOR,
    get_default_open_dir,
    setup_qsettings,
)
from .packer import COMPRESSION_MODES

logger = logging.getLogger(__name__)


def _coerce(value: Any, expected_type: type) -> Any:
    if expected_type is bool:
        # QSettings returns strings for booleans on some backends
        return value.lower() in ("true", "1", "yes", "on") if isinstance(value, str) else bool(value)
    return expected_type(value)


class ConfigManager:
    """
    QSettings-backed configuration manager.

    Values that are missing, of the wrong type or out of range fall back to
    DEFAULT_CONFIG.
    """

    def __init__(self) -> None:
        setup_qsettings()
        self._settings = QSettings()
        self._defaults = DEFAULT_CONFIG.copy()

    def get(self, key: str, default: Any | None = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Override default value (if None, uses DEFAULT_CONFIG)
        """
        fallback = default if default is not None else self._defaults.get(key)
        value = self._settings.value(key, fallback)

        if fallback is None:
            return value

        try:
            return _coerce(value, type(fallback))
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to coerce config key '{key}': {e}, using default")
            return fallback

    def set(self, key: str, value: Any) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()

    # Typed accessors

    def scale_factor(self) -> float:
        value = self.get("scale_factor")
        if not MIN_SCALE_FACTOR <= value <= MAX_SCALE_FACTOR:
            logger.warning(f"Scale factor {value} out of range, using default")
            return DEFAULT_CONFIG["scale_factor"]
        return value

    def archive_compression(self) -> str:
        value = self.get("archive_compression")
        if value not in COMPRESSION_MODES:
            logger.warning(f"Unknown archive compression '{value}', using default")
            return DEFAULT_CONFIG["archive_compression"]
        return value

    def log_level(self) -> str:
        value = str(self.get("log_level")).upper()
        return value if value in LOG_LEVELS else DEFAULT_CONFIG["log_level"]

    def last_dir(self, key: str) -> str:
        """Get ``last_open_dir`` or ``last_save_dir``, defaulting to Documents."""
        return self.get(key) or get_default_open_dir()
