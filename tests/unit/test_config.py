"""
Unit tests for configuration management.
"""

import datetime as dt
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from timebill.calculators.colors import DEFAULT_PALETTE
from timebill.config.settings import (
    EngineSettings,
    get_config,
    load_config,
    reload_config,
)


class TestEngineSettings:
    """Test cases for EngineSettings."""

    def test_config_with_valid_env_vars(self, test_config):
        """Test configuration loads correctly with valid environment variables."""
        assert test_config.timezone == "UTC"
        assert test_config.default_tax_rate == Decimal("0.10")
        assert test_config.unassigned_label == "Not set"
        assert test_config.environment == "testing"
        assert test_config.debug is False
        assert test_config.log_level == "WARNING"

    def test_default_palette(self, test_config):
        """Test that the default palette is used when none is configured."""
        assert test_config.color_palette == list(DEFAULT_PALETTE)

    def test_get_tzinfo(self, mock_env, monkeypatch):
        """Test conversion of the timezone name."""
        monkeypatch.setenv("TIMEZONE", "Asia/Tokyo")

        config = EngineSettings()

        assert config.get_tzinfo() == ZoneInfo("Asia/Tokyo")
        instant = dt.datetime(2024, 6, 3, 20, 0, tzinfo=dt.timezone.utc)
        assert instant.astimezone(config.get_tzinfo()).date() == dt.date(2024, 6, 4)

    def test_palette_from_json(self, mock_env, monkeypatch):
        """Test that a palette can be configured as a JSON list."""
        colors = [f"#0000{i:02d}" for i in range(12)]
        monkeypatch.setenv("COLOR_PALETTE", '["' + '", "'.join(colors) + '"]')

        config = EngineSettings()

        assert config.color_palette == colors

    def test_populate_by_name(self, mock_env):
        """Test that fields can be passed by their Python names."""
        config = EngineSettings(unassigned_label="(none)", default_tax_rate="0.08")

        assert config.unassigned_label == "(none)"
        assert config.default_tax_rate == Decimal("0.08")

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("TIMEZONE", "Mars/Olympus", "Unknown timezone"),
            ("DEFAULT_TAX_RATE", "-0.1", "must not be negative"),
            ("COLOR_PALETTE", '["#fff", "#000"]', "at least 10"),
            ("LOG_LEVEL", "LOUD", "Log level must be one of"),
            ("ENVIRONMENT", "staging", "Environment must be one of"),
        ],
    )
    def test_invalid_values(self, mock_env, monkeypatch, key, value, message):
        """Test that invalid settings are rejected."""
        monkeypatch.setenv(key, value)

        with pytest.raises(ValidationError, match=message):
            EngineSettings()

    def test_values_normalized(self, mock_env, monkeypatch):
        """Test case normalization of level and environment."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ENVIRONMENT", "PRODUCTION")

        config = EngineSettings()

        assert config.log_level == "DEBUG"
        assert config.environment == "production"


class TestConfigLoading:
    """Test the global configuration instance."""

    def test_get_config_is_cached(self, mock_env):
        """Test that get_config returns the same instance."""
        assert get_config() is get_config()

    def test_reload_config(self, mock_env, monkeypatch):
        """Test that reload_config picks up changed variables."""
        first = get_config()
        monkeypatch.setenv("UNASSIGNED_LABEL", "Unassigned")

        second = reload_config()

        assert second is not first
        assert second.unassigned_label == "Unassigned"
        assert get_config() is second

    def test_load_config_from_env_file(self, mock_env, monkeypatch, tmp_path):
        """Test loading values from an explicit env file."""
        monkeypatch.delenv("DEFAULT_TAX_RATE", raising=False)
        env_file = tmp_path / "billing.env"
        env_file.write_text("DEFAULT_TAX_RATE=0.19\n")

        config = load_config(str(env_file))

        assert config.default_tax_rate == Decimal("0.19")
