"""Report command: nested project/user/task/date operation report."""

import json
from typing import Optional, Tuple

import click

from timebill.aggregators.entry_filters import filter_entries
from timebill.aggregators.operation_report import build_operation_report
from timebill.calculators.time_utils import format_duration
from timebill.cli.error_handlers import with_error_handling
from timebill.cli.utils.formatters import format_info, format_success
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
from timebill.utils.logging_utils import LogContext, generate_report_id


@click.command(name="report")
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@start_option
@end_option
@preset_option
@click.option("--project", "project_ids", multiple=True, help="Only these projects.")
@click.option("--user", "user_ids", multiple=True, help="Only these users.")
@now_option
@clamp_option
@json_option
@debug_option
def report(
    entries_file: str,
    start: Optional[str],
    end: Optional[str],
    preset: Optional[str],
    project_ids: Tuple[str, ...],
    user_ids: Tuple[str, ...],
    now_value: Optional[str],
    clamp_negative: bool,
    as_json: bool,
    debug: bool,
):
    """Break time down by project, user, task and date.

    Example:
        timebill report entries.json --preset last_month
        timebill report entries.json --project P1 --json
    """
    with with_error_handling(debug), LogContext(
        report_id=generate_report_id(), command="report"
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
            user_ids=user_ids,
            reference=reference,
            tz=tz,
        )

        operation_report = build_operation_report(
            entries,
            now,
            reference=reference,
            tz=tz,
            unassigned_label=settings.unassigned_label,
            clamp_negative=clamp_negative,
        )

        if as_json:
            click.echo(json.dumps(operation_report.to_dict(), indent=2))
            return

        if not operation_report.projects:
            click.echo(format_info("No time recorded for the selected filters."))
            return

        for project in operation_report.projects:
            click.echo(
                click.style(
                    f"{project.label}: {format_duration(project.total_seconds)}",
                    bold=True,
                )
            )
            for user in project.users:
                click.echo(f"  {user.label}: {format_duration(user.total_seconds)}")
                for task in user.tasks:
                    click.echo(
                        f"    - {task.label}: {format_duration(task.total_seconds)}"
                    )
                    for day in task.days:
                        click.echo(
                            f"      {day.date.isoformat()}: "
                            f"{format_duration(day.total_seconds)}"
                        )

        click.echo(
            format_success(
                f"Total {format_duration(operation_report.total_seconds)} "
                f"across {len(operation_report.projects)} project(s)"
            )
        )
