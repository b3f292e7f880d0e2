"""CLI commands for timebill."""

from timebill.cli.commands.compare import compare
from timebill.cli.commands.invoice import invoice
from timebill.cli.commands.report import report
from timebill.cli.commands.summarize import summarize
from timebill.cli.commands.validate import validate

__all__ = ["compare", "invoice", "report", "summarize", "validate"]
