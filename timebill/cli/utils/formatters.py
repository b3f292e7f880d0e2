"""Output formatting utilities for CLI."""

from typing import List, Sequence

import click

from timebill.aggregators.period_comparison import PercentChange
from timebill.errors import DivisionUndefined


def format_success(message: str) -> str:
    """Format a success message in green."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return click.style(f"ℹ {message}", fg="blue")


def format_percent(value: float) -> str:
    """Format a share as a percentage with one decimal.

    Example:
        >>> format_percent(33.3333)
        '33.3%'
    """
    return f"{value:.1f}%"


def format_percent_change(change: PercentChange) -> str:
    """Format a percent change with sign, or N/A for a zero baseline.

    Example:
        >>> format_percent_change(12.5)
        '+12.5%'
        >>> format_percent_change(DivisionUndefined(current=5, previous=0))
        'N/A'
    """
    if isinstance(change, DivisionUndefined):
        return "N/A"
    return f"{change:+.1f}%"


def format_table(
    headers: List[str], rows: Sequence[Sequence[object]], max_width: int = 80
) -> str:
    """Format data as a plain-text table.

    Args:
        headers: List of column headers
        rows: Data rows (each row is a sequence of cell values)
        max_width: Maximum width for each column (default: 80)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    col_widths = [min(w, max_width) for w in col_widths]

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    def render(cells: Sequence[object]) -> str:
        formatted = [
            f" {str(cell)[: col_widths[i]]:<{col_widths[i]}} "
            for i, cell in enumerate(cells)
            if i < len(col_widths)
        ]
        return "|" + "|".join(formatted) + "|"

    table_lines = [separator, render(headers), separator]
    if rows:
        table_lines.extend(render(row) for row in rows)
        table_lines.append(separator)

    return "\n".join(table_lines)
