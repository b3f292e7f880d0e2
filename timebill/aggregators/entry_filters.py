"""Entry filters applied before aggregation.

Report screens narrow the fetched entries by team, project, task and user
selections and by a date range. Each filter returns a new list and leaves the
input untouched; an empty or missing selection means "no restriction".
"""

import datetime as dt
import logging
from typing import Collection, List, Optional, Sequence

from timebill.calculators.time_utils import local_date
from timebill.models.date_range import DateRange
from timebill.models.entry import ReferenceData, TimeEntry

logger = logging.getLogger(__name__)


def filter_by_date_range(
    entries: Sequence[TimeEntry],
    date_range: DateRange,
    tz: Optional[dt.tzinfo] = None,
) -> List[TimeEntry]:
    """Keep entries whose start date falls inside the range (inclusive).

    Example:
        >>> r = DateRange(start=dt.date(2024, 6, 1), end=dt.date(2024, 6, 30))
        >>> filter_by_date_range([], r)
        []
    """
    return [e for e in entries if date_range.contains(local_date(e.start_time, tz))]


def filter_entries(
    entries: Sequence[TimeEntry],
    date_range: Optional[DateRange] = None,
    project_ids: Optional[Collection[str]] = None,
    task_ids: Optional[Collection[str]] = None,
    user_ids: Optional[Collection[str]] = None,
    team_ids: Optional[Collection[str]] = None,
    reference: Optional[ReferenceData] = None,
    tz: Optional[dt.tzinfo] = None,
) -> List[TimeEntry]:
    """Apply all report filters.

    Team filtering needs the project-to-team association from ``reference``;
    entries whose project is unknown never match a team filter.

    Args:
        entries: Entries to filter
        date_range: Keep entries starting inside this range
        project_ids: Keep entries of these projects
        task_ids: Keep entries of these tasks
        user_ids: Keep entries of these users
        team_ids: Keep entries whose project belongs to these teams
        reference: Lookup tables (required for meaningful team filtering)
        tz: Reporting timezone for aware instants

    Returns:
        Filtered entries in input order
    """
    reference = reference or ReferenceData()
    result = list(entries)

    if date_range is not None:
        result = filter_by_date_range(result, date_range, tz)
    if project_ids:
        result = [e for e in result if e.project_id in project_ids]
    if task_ids:
        result = [e for e in result if e.task_id in task_ids]
    if user_ids:
        result = [e for e in result if e.user_id in user_ids]
    if team_ids:
        result = [e for e in result if reference.team_id_for(e.project_id) in team_ids]

    logger.info(f"Filtered {len(entries)} entries to {len(result)}")
    return result
