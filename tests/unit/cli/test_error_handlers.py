"""Unit tests for CLI error handling."""

import datetime as dt
import json

import click
import pytest
from pydantic import ValidationError

from timebill.cli.error_handlers import (
    CLIError,
    InputFileError,
    handle_cli_error,
    with_error_handling,
)
from timebill.errors import InvalidRangeError, MissingRateError, UnknownDimensionError
from timebill.models import DateRange


def make_validation_error():
    try:
        DateRange(start=dt.date(2024, 6, 2), end=dt.date(2024, 6, 1))
    except ValidationError as e:
        return e


class TestHandleCliError:
    """Test exit codes and messages per error type."""

    @pytest.mark.parametrize(
        "error,exit_code",
        [
            (InputFileError("bad file", "fix it"), 1),
            (FileNotFoundError(2, "No such file", "entries.json"), 1),
            (json.JSONDecodeError("Expecting value", "x", 0), 1),
            (UnknownDimensionError("client", ["project"]), 2),
            (
                InvalidRangeError(
                    "e1", dt.datetime(2024, 6, 3, 10), dt.datetime(2024, 6, 3, 9), -3600
                ),
                3,
            ),
            (MissingRateError("P1"), 4),
            (ValueError("bad number"), 5),
            (click.Abort(), 130),
            (RuntimeError("unexpected"), 255),
        ],
    )
    def test_exit_codes(self, error, exit_code, capsys):
        """Test the exit code chosen for each error type."""
        assert handle_cli_error(error) == exit_code

    def test_validation_error(self):
        """Test that pydantic errors are data validation errors."""
        assert handle_cli_error(make_validation_error()) == 5

    def test_messages(self, capsys):
        """Test messages and hints."""
        handle_cli_error(CLIError("Cannot read entries", "Check the path"))
        handle_cli_error(MissingRateError("P7"))

        out = capsys.readouterr().out
        assert "Input Error: Cannot read entries" in out
        assert "Hint: Check the path" in out
        assert "No billing rate configured for group 'P7'" in out

    def test_unexpected_error_without_debug(self, capsys):
        """Test that unexpected errors suggest --debug."""
        handle_cli_error(RuntimeError("boom"))

        out = capsys.readouterr().out
        assert "Unexpected Error: RuntimeError" in out
        assert "--debug" in out


class TestWithErrorHandling:
    """Test the error handling context manager."""

    def test_exits_with_code(self, capsys):
        """Test that handled errors exit with their code."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise MissingRateError("P1")

        assert exc_info.value.code == 4

    def test_passes_system_exit_through(self):
        """Test that explicit exits are not treated as errors."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise SystemExit(1)

        assert exc_info.value.code == 1

    def test_no_error(self):
        """Test that a clean block does nothing."""
        with with_error_handling():
            value = 1

        assert value == 1
