"""Validate command: report every problem in an entries file."""

import json
from typing import Optional

import click

from timebill.aggregators.grouping import group_entries
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from timebill.cli.utils.loaders import load_entries, load_rates
from timebill.cli.utils.options import (
    debug_option,
    json_option,
    now_option,
    resolve_now,
)
from timebill.config.settings import get_config
from timebill.models.dimensions import GroupDimension
from timebill.validators.entry_validator import EntryValidator
from timebill.validators.validation_report import ValidationSeverity


@click.command(name="validate")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--rates",
    "rates_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Also check that every group has a rate.",
)
@click.option(
    "--by",
    "dimension",
    type=click.Choice([d.value for d in GroupDimension]),
    default=GroupDimension.PROJECT.value,
    show_default=True,
    help="Dimension whose groups are checked against the rates.",
)
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Minimum severity level to display.",
)
@now_option
@json_option
@debug_option
def validate(
    entries_file: str,
    rates_file: Optional[str],
    dimension: str,
    severity: str,
    now_value: Optional[str],
    as_json: bool,
    debug: bool,
):
    """Check entries (and optionally rates) and list every issue found.

    Checks for:
    - Entries whose end is before their start
    - Running entries
    - Entries without project or user
    - Groups without a billing rate

    Returns exit code 1 if errors are found.

    Example:
        timebill validate entries.json
        timebill validate entries.json --rates rates.json --severity error
    """
    with with_error_handling(debug):
        settings = get_config()
        tz = settings.get_tzinfo()
        now = resolve_now(now_value, settings)
        min_severity = ValidationSeverity[severity.upper()]

        entries, reference = load_entries(entries_file, tz)
        validator = EntryValidator()
        report = validator.validate_entries(entries, now)

        if rates_file is not None:
            rates = load_rates(rates_file)
            # Invalid entries are already reported; count them as zero here
            groups = group_entries(
                entries,
                dimension,
                now,
                reference=reference,
                tz=tz,
                unassigned_label=settings.unassigned_label,
                clamp_negative=True,
            )
            report.merge(validator.validate_rates(groups, rates))

        if as_json:
            click.echo(json.dumps(report.to_dict(), indent=2))
        else:
            click.echo(format_info(f"Checked {len(entries)} entries"))
            for issue in report.issues:
                if issue.severity < min_severity:
                    continue
                if issue.severity == ValidationSeverity.ERROR:
                    click.echo(format_error(str(issue)))
                elif issue.severity == ValidationSeverity.WARNING:
                    click.echo(format_warning(str(issue)))
                else:
                    click.echo(format_info(str(issue)))

            if report.is_valid():
                click.echo(format_success(f"Validation passed ({report.summary()})"))
            else:
                click.echo(format_error(f"Validation failed ({report.summary()})"))

        if not report.is_valid():
            raise SystemExit(1)
