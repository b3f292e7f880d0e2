"""Shared option parsing for CLI commands."""

import datetime as dt
from typing import Optional

import click

from timebill.calculators.date_ranges import PRESETS, preset_range
from timebill.config.settings import EngineSettings
from timebill.models.date_range import DateRange


def parse_date_input(date_str: str, end_of_month: bool = False) -> dt.date:
    """Parse a date string in YYYY-MM-DD or YYYY-MM format.

    Args:
        date_str: Date string
        end_of_month: For YYYY-MM input, return the last day of the month
            instead of the first

    Raises:
        click.BadParameter: If the format is invalid
    """
    try:
        return dt.datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        pass

    try:
        parsed = dt.datetime.strptime(date_str, "%Y-%m")
    except ValueError:
        raise click.BadParameter(
            f"Invalid date format: {date_str}. Expected YYYY-MM-DD or YYYY-MM"
        )

    first = dt.date(parsed.year, parsed.month, 1)
    if not end_of_month:
        return first
    return preset_range("this_month", first).end


def resolve_now(value: Optional[str], settings: EngineSettings) -> dt.datetime:
    """Resolve the reference instant for running entries.

    An explicit ``--now`` wins; naive values are taken in the reporting
    timezone. Without it, the current wall clock in that timezone is used.
    """
    tz = settings.get_tzinfo()
    if value is None:
        return dt.datetime.now(tz)
    try:
        now = dt.datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid --now value: {value}. Expected ISO 8601")
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return now


def resolve_range(
    start: Optional[str],
    end: Optional[str],
    preset: Optional[str],
    today: dt.date,
    required: bool = False,
) -> Optional[DateRange]:
    """Build the report range from --start/--end or --preset.

    Raises:
        click.UsageError: If options are combined incorrectly
    """
    if preset is not None and (start is not None or end is not None):
        raise click.UsageError("Use either --preset or --start/--end, not both")

    if preset is not None:
        return preset_range(preset, today)

    if (start is None) != (end is None):
        raise click.UsageError("--start and --end must be used together")

    if start is None:
        if required:
            raise click.UsageError(
                "A date range is required (--start/--end or --preset)"
            )
        return None

    start_date = parse_date_input(start)
    end_date = parse_date_input(end, end_of_month=True)
    if start_date > end_date:
        raise click.UsageError("--start must be before or equal to --end")
    return DateRange(start=start_date, end=end_date)


preset_option = click.option(
    "--preset",
    type=click.Choice(PRESETS),
    default=None,
    help="Named date range relative to today.",
)
start_option = click.option(
    "--start", type=str, default=None, help="Range start (YYYY-MM-DD or YYYY-MM)."
)
end_option = click.option(
    "--end", type=str, default=None, help="Range end (YYYY-MM-DD or YYYY-MM)."
)
now_option = click.option(
    "--now",
    "now_value",
    type=str,
    default=None,
    help="Reference instant for running entries (ISO 8601). Defaults to now.",
)
json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print JSON instead of a table.",
)
debug_option = click.option(
    "--debug", is_flag=True, default=False, help="Show full stack traces on errors."
)
clamp_option = click.option(
    "--clamp-negative",
    is_flag=True,
    default=False,
    help="Count entries whose end is before their start as zero instead of failing.",
)
