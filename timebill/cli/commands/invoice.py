"""Invoice command: billed amounts per group with tax."""

import json
from typing import Optional

import click

from timebill.aggregators.entry_filters import filter_entries
from timebill.aggregators.grouping import group_entries
from timebill.calculators.billing_calculator import compute_invoice, to_decimal
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import format_info, format_success, format_table
from timebill.cli.utils.loaders import load_entries, load_rates
from timebill.cli.utils.options import (
    clamp_option,
    debug_option,
    end_option,
    json_option,
    now_option,
    preset_option,
    resolve_now,
    resolve_range,
    start_option,
)
from timebill.config.settings import get_config
from timebill.models.dimensions import GroupDimension
from timebill.utils.logging_utils import (
    LogContext,
    generate_report_id,
    log_function_call,
)


@click.command(name="invoice")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--rates",
    "rates_file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="JSON object mapping group id to hourly rate.",
)
@click.option(
    "--by",
    "dimension",
    type=click.Choice([d.value for d in GroupDimension]),
    default=GroupDimension.PROJECT.value,
    show_default=True,
    help="Dimension whose groups are billed.",
)
@click.option(
    "--tax-rate",
    type=str,
    default=None,
    help="Tax rate as a fraction, e.g. 0.10 (defaults to DEFAULT_TAX_RATE).",
)
@start_option
@end_option
@preset_option
@now_option
@clamp_option
@json_option
@debug_option
@log_function_call(level="DEBUG")
def invoice(
    entries_file: str,
    rates_file: str,
    dimension: str,
    tax_rate: Optional[str],
    start: Optional[str],
    end: Optional[str],
    preset: Optional[str],
    now_value: Optional[str],
    clamp_negative: bool,
    as_json: bool,
    debug: bool,
):
    """Compute invoice lines, subtotal, tax and total.

    Amounts are floored to whole currency units per line; tax is floored on
    the subtotal.

    Example:
        timebill invoice entries.json --rates rates.json --preset last_month
    """
    with with_error_handling(debug), LogContext(
        report_id=generate_report_id(), command="invoice", dimension=dimension
    ):
        settings = get_config()
        tz = settings.get_tzinfo()
        now = resolve_now(now_value, settings)
        date_range = resolve_range(start, end, preset, now.date())
        effective_tax_rate = (
            to_decimal(tax_rate) if tax_rate is not None else settings.default_tax_rate
        )

        entries, reference = load_entries(entries_file, tz)
        rates = load_rates(rates_file)
        entries = filter_entries(entries, date_range=date_range, tz=tz)

        groups = group_entries(
            entries,
            dimension,
            now,
            reference=reference,
            tz=tz,
            palette=settings.color_palette,
            unassigned_label=settings.unassigned_label,
            clamp_negative=clamp_negative,
        )
        result = compute_invoice(groups, rates, effective_tax_rate)

        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            return

        if not result.lines:
            click.echo(format_info("No billable time for the selected range."))

        headers = ["Group", "Hours", "Rate", "Amount"]
        rows = [
            [line.label, line.hours, line.rate, line.amount] for line in result.lines
        ]
        click.echo(format_table(headers, rows))
        click.echo(f"Subtotal: {result.subtotal}")
        click.echo(f"Tax ({effective_tax_rate}): {result.tax}")
        click.echo(format_success(f"Total: {result.total}"))
