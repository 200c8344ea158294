"""
Tests for the QSettings-backed configuration manager.
"""

from unittest.mock import MagicMock, patch

import pytest

from snappdf.core.config import DEFAULT_CONFIG
from snappdf.core.config_manager import ConfigManager


@pytest.fixture
def settings_store():
    """Dict-backed stand-in for QSettings."""
    store: dict = {}
    settings = MagicMock()
    settings.value.side_effect = lambda key, default=None: store.get(key, default)
    settings.setValue.side_effect = lambda key, value: store.__setitem__(key, value)
    settings.contains.side_effect = lambda key: key in store
    settings.remove.side_effect = lambda key: store.pop(key, None)
    settings.clear.side_effect = store.clear

    with (
        patch("snappdf.core.config_manager.QSettings", return_value=settings),
        patch("snappdf.core.config_manager.setup_qsettings"),
    ):
        yield store


class TestConfigManager:
    """Test ConfigManager defaults and coercion."""

    def test_defaults(self, settings_store):
        config = ConfigManager()

        for key, value in DEFAULT_CONFIG.items():
            assert config.get(key) == value

    def test_set_and_get(self, settings_store):
        config = ConfigManager()
        config.set("last_open_dir", "/tmp/pdfs")

        assert config.get("last_open_dir") == "/tmp/pdfs"

    def test_string_values_coerced(self, settings_store):
        settings_store["scale_factor"] = "3.5"
        config = ConfigManager()

        assert config.scale_factor() == 3.5

    def test_uncoercible_value_falls_back(self, settings_store):
        settings_store["scale_factor"] = "huge"

        assert ConfigManager().get("scale_factor") == 2.0

    @pytest.mark.parametrize("value", [0.1, 10.0])
    def test_scale_factor_out_of_range(self, settings_store, value):
        settings_store["scale_factor"] = value

        assert ConfigManager().scale_factor() == 2.0

    def test_archive_compression(self, settings_store):
        config = ConfigManager()
        assert config.archive_compression() == "deflated"

        settings_store["archive_compression"] = "stored"
        assert config.archive_compression() == "stored"

        settings_store["archive_compression"] = "bzip2"
        assert config.archive_compression() == "deflated"

    def test_log_level(self, settings_store):
        config = ConfigManager()
        settings_store["log_level"] = "debug"
        assert config.log_level() == "DEBUG"

        settings_store["log_level"] = "chatty"
        assert config.log_level() == "INFO"

    def test_last_dir_defaults(self, settings_store):
        with patch("snappdf.core.config_manager.get_default_open_dir", return_value="/home/user/Documents"):
            assert ConfigManager().last_dir("last_save_dir") == "/home/user/Documents"
