"""Compare command: current period against the preceding one."""

import json
from typing import Optional

import click

from timebill.aggregators.period_comparison import compare_periods
from timebill.calculators.time_utils import format_duration
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import (
    format_info,
    format_percent_change,
    format_table,
)
from timebill.cli.utils.loaders import load_entries
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
from timebill.models.dimensions import AveragePolicy, BucketUnit
from timebill.utils.logging_utils import LogContext, generate_report_id


@click.command(name="compare")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@start_option
@end_option
@preset_option
@click.option(
    "--unit",
    type=click.Choice([u.value for u in BucketUnit]),
    default=BucketUnit.DAY.value,
    show_default=True,
    help="Bucket size.",
)
@click.option(
    "--average",
    "average_policy",
    type=click.Choice([p.value for p in AveragePolicy]),
    required=True,
    help="Average over non-empty buckets or over every calendar bucket.",
)
@now_option
@clamp_option
@json_option
@debug_option
def compare(
    entries_file: str,
    start: Optional[str],
    end: Optional[str],
    preset: Optional[str],
    unit: str,
    average_policy: str,
    now_value: Optional[str],
    clamp_negative: bool,
    as_json: bool,
    debug: bool,
):
    """Compare a date range with the equal-length range before it.

    Example:
        timebill compare entries.json --preset this_week --average calendar
        timebill compare entries.json --start 2024-06 --end 2024-06 --unit week \\
            --average non_empty
    """
    with with_error_handling(debug), LogContext(
        report_id=generate_report_id(), command="compare", bucket_unit=unit
    ):
        settings = get_config()
        tz = settings.get_tzinfo()
        now = resolve_now(now_value, settings)
        date_range = resolve_range(start, end, preset, now.date(), required=True)

        entries, _ = load_entries(entries_file, tz)
        comparison = compare_periods(
            entries,
            date_range,
            unit,
            now,
            average_policy,
            tz=tz,
            clamp_negative=clamp_negative,
        )

        if as_json:
            click.echo(json.dumps(comparison.to_dict(), indent=2))
            return

        click.echo(
            format_info(
                f"Current {comparison.current_range.start} to "
                f"{comparison.current_range.end}, previous "
                f"{comparison.previous_range.start} to {comparison.previous_range.end}"
            )
        )

        headers = ["Current", "Time", "Previous", "Time", "Change"]
        rows = [
            [
                d.current_key or "-",
                format_duration(d.current_seconds),
                d.previous_key or "-",
                format_duration(d.previous_seconds),
                format_percent_change(d.percent_change),
            ]
            for d in comparison.bucket_deltas()
        ]
        click.echo(format_table(headers, rows))

        click.echo(
            f"Total:   {format_duration(comparison.current_total)} vs "
            f"{format_duration(comparison.previous_total)} "
            f"({format_percent_change(comparison.percent_change)})"
        )
        click.echo(
            f"Average: {format_duration(int(comparison.current_average))} vs "
            f"{format_duration(int(comparison.previous_average))} per {unit}"
        )
