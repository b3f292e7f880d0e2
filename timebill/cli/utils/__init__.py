"""CLI utilities for formatting, input loading and option parsing."""

from timebill.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_table,
    format_warning,
)

__all__ = [
    "format_success",
    "format_error",
    "format_warning",
    "format_info",
    "format_table",
]
