"""Summarize command: grouped, percentage-weighted time report."""

import json
from typing import Optional, Tuple

import click

from timebill.aggregators.entry_filters import filter_entries
from timebill.aggregators.grouping import group_entries, summarize_groups
from timebill.calculators.time_utils import format_duration
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import (
    format_info,
    format_percent,
    format_success,
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
from timebill.models.dimensions import GroupDimension
from timebill.utils.logging_utils import LogContext, generate_report_id


@click.command(name="summarize")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--by",
    "dimension",
    type=click.Choice([d.value for d in GroupDimension]),
    default=GroupDimension.PROJECT.value,
    show_default=True,
    help="Dimension to group by.",
)
@start_option
@end_option
@preset_option
@click.option("--project", "project_ids", multiple=True, help="Only these projects.")
@click.option("--user", "user_ids", multiple=True, help="Only these users.")
@click.option("--team", "team_ids", multiple=True, help="Only these teams.")
@click.option("--task", "task_ids", multiple=True, help="Only these tasks.")
@now_option
@clamp_option
@json_option
@debug_option
def summarize(
    entries_file: str,
    dimension: str,
    start: Optional[str],
    end: Optional[str],
    preset: Optional[str],
    project_ids: Tuple[str, ...],
    user_ids: Tuple[str, ...],
    team_ids: Tuple[str, ...],
    task_ids: Tuple[str, ...],
    now_value: Optional[str],
    clamp_negative: bool,
    as_json: bool,
    debug: bool,
):
    """Summarize time per project, team, user, day, week or month.

    Example:
        timebill summarize entries.json --by project --preset this_month
        timebill summarize entries.json --by week --start 2024-06 --end 2024-08
    """
    with with_error_handling(debug), LogContext(
        report_id=generate_report_id(), command="summarize", dimension=dimension
    ):
        settings = get_config()
        tz = settings.get_tzinfo()
        now = resolve_now(now_value, settings)
        date_range = resolve_range(start, end, preset, now.date())

        entries, reference = load_entries(entries_file, tz)
        entries = filter_entries(
            entries,
            date_range=date_range,
            project_ids=project_ids,
            task_ids=task_ids,
            user_ids=user_ids,
            team_ids=team_ids,
            reference=reference,
            tz=tz,
        )

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
        summary = summarize_groups(groups)

        if as_json:
            click.echo(
                json.dumps(
                    {
                        "groups": [g.to_dict() for g in groups],
                        "summary": summary.to_dict(),
                    },
                    indent=2,
                )
            )
            return

        if not groups:
            click.echo(format_info("No time recorded for the selected filters."))
            return

        headers = ["Group", "Time", "Share", "Color"]
        rows = [
            [
                g.label,
                format_duration(g.total_seconds),
                format_percent(g.percentage_of_total),
                g.color,
            ]
            for g in groups
        ]
        click.echo(format_table(headers, rows))
        click.echo(
            format_success(
                f"Total {format_duration(summary.total_seconds)} "
                f"across {summary.group_count} group(s)"
            )
        )
