"""timebill CLI.

This module provides a command-line interface over the aggregation engine.
It includes commands for summaries, period comparisons, invoices, nested
operation reports and validation of exported time entries.
"""

import click

from timebill.cli.commands import compare, invoice, report, summarize, validate
from timebill.config.logging_config import LoggingConfig, configure_logging
from timebill.config.settings import get_config

__version__ = "1.0.0"


@click.group(help="timebill - Time-entry reports, period comparisons and invoices")
@click.version_option(version=__version__)
@click.option(
    "--log-format",
    type=click.Choice(["standard", "json"]),
    default=None,
    help="Log output format (defaults to LOG_FORMAT or standard).",
)
def cli(log_format):
    """timebill CLI main entry point."""
    configure_logging(LoggingConfig.from_settings(get_config(), log_format))


cli.add_command(summarize)
cli.add_command(compare)
cli.add_command(invoice)
cli.add_command(report)
cli.add_command(validate)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
