"""Tests for centralized logging configuration."""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from timebill.config.logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging,
)
from timebill.config.settings import EngineSettings


def flush_handlers():
    for handler in logging.getLogger().handlers:
        handler.flush()


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_configuration(self):
        """Test default logging configuration."""
        config = LoggingConfig()

        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.log_file is None
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.max_file_size == 10 * 1024 * 1024  # 10MB
        assert config.backup_count == 5

    def test_environment_variable_override(self):
        """Test configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "LOG_LEVEL": "DEBUG",
                "LOG_FORMAT": "json",
                "LOG_FILE": "/tmp/timebill-test.log",
                "LOG_MAX_FILE_SIZE": "5242880",  # 5MB
                "LOG_BACKUP_COUNT": "3",
            },
        ):
            config = LoggingConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.log_file == "/tmp/timebill-test.log"
        assert config.enable_file is True
        assert config.max_file_size == 5242880
        assert config.backup_count == 3

    def test_from_settings(self, mock_env):
        """Test that the settings' log level is used."""
        settings = EngineSettings(log_level="ERROR")

        config = LoggingConfig.from_settings(settings, "json")

        assert config.log_level == "ERROR"
        assert config.log_format == "json"
        assert config.enable_file is False

    def test_from_settings_debug_forces_debug_level(self, mock_env):
        """Test that DEBUG mode overrides the configured level."""
        settings = EngineSettings(debug=True, log_level="WARNING")

        assert LoggingConfig.from_settings(settings).log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test invalid log level raises error."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(log_level="INVALID")

    def test_invalid_log_format(self):
        """Test invalid log format raises error."""
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingConfig(log_format="xml")

    def test_file_logging_enabled_without_path(self):
        """Test file logging enabled without file path raises error."""
        with pytest.raises(ValueError, match="log_file must be specified"):
            LoggingConfig(enable_file=True, log_file=None)


class TestConfigureLogging:
    """Test configure_logging function."""

    def test_console_handler_configuration(self):
        """Test console handler is configured correctly."""
        configure_logging(LoggingConfig(log_level="DEBUG", enable_console=True))

        root_logger = logging.getLogger()

        stream_handlers = [
            h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)
        ]
        assert len(stream_handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_log_level_filtering(self):
        """Test log level filtering works correctly."""
        configure_logging(LoggingConfig(log_level="WARNING", enable_console=True))

        root_logger = logging.getLogger()

        assert root_logger.level == logging.WARNING
        for handler in root_logger.handlers:
            assert handler.level == logging.WARNING

    def test_standard_format_written_to_file(self, tmp_path):
        """Test the standard format in a log file."""
        log_file = tmp_path / "logs" / "timebill.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        get_logger("timebill.test").info("Grouped 3 entries")
        flush_handlers()

        content = log_file.read_text()
        assert "INFO - timebill.test - Grouped 3 entries" in content
        for handler in logging.getLogger().handlers:
            assert not isinstance(handler.formatter, JSONFormatter)

    def test_json_format_structure(self, tmp_path):
        """Test JSON log format structure."""
        log_file = tmp_path / "timebill.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                log_format="json",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        get_logger("timebill.test").info(
            "Computed invoice", extra={"group_count": 2}
        )
        flush_handlers()

        log_entry = json.loads(log_file.read_text().strip())
        assert log_entry["level"] == "INFO"
        assert log_entry["logger"] == "timebill.test"
        assert log_entry["message"] == "Computed invoice"
        assert log_entry["group_count"] == 2
        assert "args" not in log_entry

    def test_rotating_file_handler(self, tmp_path):
        """Test rotating file handler configuration."""
        log_file = tmp_path / "timebill.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
                max_file_size=100,  # Very small for testing
                backup_count=2,
            )
        )

        logger = get_logger("timebill.test")
        for i in range(50):
            logger.info(f"Log message {i} with some padding to increase size")
        flush_handlers()

        assert list(Path(tmp_path).glob("timebill.log.*"))

    def test_reconfiguration(self):
        """Test reconfiguration replaces handlers."""
        configure_logging(LoggingConfig(log_level="INFO"))
        root_logger = logging.getLogger()
        initial_handler_count = len(root_logger.handlers)

        configure_logging(LoggingConfig(log_level="DEBUG"))

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == initial_handler_count


class TestResetLogging:
    """Test reset_logging function."""

    def test_reset_removes_handlers(self):
        """Test reset_logging removes all handlers."""
        configure_logging(LoggingConfig(log_level="INFO"))

        reset_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 0
        assert root_logger.level == logging.WARNING
