"""Error handling for CLI commands."""

import json
import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError

from timebill.cli.utils.formatters import format_error, format_warning
from timebill.errors import (
    InvalidRangeError,
    MissingRateError,
    UnknownDimensionError,
)


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class InputFileError(CLIError):
    """Error reading or parsing an input file."""

    pass


def _echo(message: str, hint: Optional[str] = None) -> None:
    click.echo(format_error(message))
    if hint:
        click.echo(format_warning(f"Hint: {hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error and pick the exit code.

    Exit codes:
        1: input file problems
        2: unknown dimension / bucket unit / preset
        3: invalid entry range
        4: missing billing rate
        5: malformed input records
        130: cancelled by user
        255: unexpected error

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code
    """
    if isinstance(error, click.ClickException):
        error.show()
        return error.exit_code

    elif isinstance(error, CLIError):
        _echo(f"Input Error: {error.message}", error.recovery_hint)
        return 1

    elif isinstance(error, FileNotFoundError):
        _echo(f"File not found: {error.filename}")
        return 1

    elif isinstance(error, json.JSONDecodeError):
        _echo(f"Invalid JSON: {error}", "Check the file was exported as JSON")
        return 1

    elif isinstance(error, UnknownDimensionError):
        _echo(str(error))
        return 2

    elif isinstance(error, InvalidRangeError):
        _echo(
            f"Invalid Range: {error}",
            "Fix the entry or re-run with --clamp-negative to count it as zero",
        )
        return 3

    elif isinstance(error, MissingRateError):
        _echo(
            f"Missing Rate: {error}",
            "Add a rate for this group to the rates file",
        )
        return 4

    elif isinstance(error, (ValidationError, ValueError)):
        _echo(f"Data Validation Error: {error}")
        return 5

    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))

    if debug:
        click.echo("\nFull stack trace:")
        click.echo(traceback.format_exc())
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))

    return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                ...
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False

    return ErrorHandler(debug)
