"""Grouping engine for percentage-weighted time summaries.

This module partitions time entries along one dimension and computes, per
group, the total duration, its share of the grand total and a stable display
color.

The engine:
1. Normalizes every entry to seconds (running entries measured up to ``now``)
2. Derives a (group id, label) pair per entry with one key function per
   dimension
3. Sums durations per group, keeping first-encountered order
4. Sorts groups by total descending (ties keep encounter order)
5. Computes percentages and assigns palette colors by sorted position

Every entry lands in exactly one group: entries without the association a
dimension needs go to the ``unassigned`` group instead of being dropped.
"""

import datetime as dt
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from timebill.calculators.colors import DEFAULT_PALETTE, color_for_group
from timebill.calculators.time_utils import (
    bucket_key,
    bucket_label,
    duration_seconds,
    local_date,
)
from timebill.models.aggregates import (
    DEFAULT_UNASSIGNED_LABEL,
    UNASSIGNED_GROUP_ID,
    AggregateGroup,
    GroupSummary,
)
from timebill.models.dimensions import GroupDimension
from timebill.models.entry import ReferenceData, TimeEntry

logger = logging.getLogger(__name__)

GroupKey = Tuple[str, str]


class _KeyContext:
    """Per-call settings shared by the key functions."""

    def __init__(
        self,
        reference: ReferenceData,
        tz: Optional[dt.tzinfo],
        unassigned_label: str,
    ):
        self.reference = reference
        self.tz = tz
        self.unassigned = (UNASSIGNED_GROUP_ID, unassigned_label)


def _project_key(entry: TimeEntry, ctx: _KeyContext) -> GroupKey:
    if entry.project_id is None:
        return ctx.unassigned
    return entry.project_id, ctx.reference.project_name(entry.project_id)


def _team_key(entry: TimeEntry, ctx: _KeyContext) -> GroupKey:
    team_id = ctx.reference.team_id_for(entry.project_id)
    if team_id is None:
        return ctx.unassigned
    return team_id, ctx.reference.team_names.get(team_id, team_id)


def _user_key(entry: TimeEntry, ctx: _KeyContext) -> GroupKey:
    if entry.user_id is None:
        return ctx.unassigned
    return entry.user_id, ctx.reference.user_names.get(entry.user_id, entry.user_id)


KeyFunction = Callable[[TimeEntry, _KeyContext], GroupKey]


def _calendar_key(dimension: GroupDimension) -> KeyFunction:
    unit = dimension.bucket_unit

    def key(entry: TimeEntry, ctx: _KeyContext) -> GroupKey:
        day = local_date(entry.start_time, ctx.tz)
        return bucket_key(day, unit), bucket_label(day, unit)

    return key


_KEY_FUNCTIONS: Dict[GroupDimension, KeyFunction] = {
    GroupDimension.PROJECT: _project_key,
    GroupDimension.TEAM: _team_key,
    GroupDimension.USER: _user_key,
    GroupDimension.DAY: _calendar_key(GroupDimension.DAY),
    GroupDimension.WEEK: _calendar_key(GroupDimension.WEEK),
    GroupDimension.MONTH: _calendar_key(GroupDimension.MONTH),
}


def group_key(
    entry: TimeEntry,
    dimension: Union[GroupDimension, str],
    reference: Optional[ReferenceData] = None,
    tz: Optional[dt.tzinfo] = None,
    unassigned_label: str = DEFAULT_UNASSIGNED_LABEL,
) -> GroupKey:
    """Derive the (group id, label) pair of a single entry.

    Raises:
        UnknownDimensionError: If the dimension is not recognised

    Example:
        >>> entry = TimeEntry(id="e1", start_time=dt.datetime(2024, 6, 6, 9, 0))
        >>> group_key(entry, "week")
        ('2024-06-03', 'Week of 2024/06/03')
        >>> group_key(entry, "project")
        ('unassigned', 'Not set')
    """
    dimension = GroupDimension.parse(dimension)
    ctx = _KeyContext(reference or ReferenceData(), tz, unassigned_label)
    return _KEY_FUNCTIONS[dimension](entry, ctx)


def group_entries(
    entries: Sequence[TimeEntry],
    dimension: Union[GroupDimension, str],
    now: dt.datetime,
    reference: Optional[ReferenceData] = None,
    tz: Optional[dt.tzinfo] = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
    unassigned_label: str = DEFAULT_UNASSIGNED_LABEL,
    clamp_negative: bool = False,
) -> List[AggregateGroup]:
    """Group entries along a dimension.

    Args:
        entries: Time entries to group (not modified)
        dimension: Grouping dimension, enum member or its string value
        now: Reference instant for running entries
        reference: Lookup tables for labels and team association
        tz: Reporting timezone for calendar dimensions
        palette: Colors to assign from
        unassigned_label: Label of the sentinel group
        clamp_negative: Clamp negative durations to 0 instead of raising

    Returns:
        Groups sorted by total_seconds descending, ties in encounter order

    Raises:
        UnknownDimensionError: If the dimension is not recognised
        InvalidRangeError: If an entry has a negative duration

    Example:
        >>> entries = [
        ...     TimeEntry(id="1", project_id="P1",
        ...               start_time=dt.datetime(2024, 6, 3, 9),
        ...               end_time=dt.datetime(2024, 6, 3, 10)),
        ...     TimeEntry(id="2", project_id="P2",
        ...               start_time=dt.datetime(2024, 6, 3, 10),
        ...               end_time=dt.datetime(2024, 6, 3, 13)),
        ... ]
        >>> groups = group_entries(entries, "project", now=dt.datetime(2024, 6, 4))
        >>> [(g.id, g.percentage_of_total) for g in groups]
        [('P2', 75.0), ('P1', 25.0)]
    """
    dimension = GroupDimension.parse(dimension)
    key_function = _KEY_FUNCTIONS[dimension]
    ctx = _KeyContext(reference or ReferenceData(), tz, unassigned_label)

    logger.debug(f"Grouping {len(entries)} entries by {dimension.value}")

    if not entries:
        return []

    # Dicts preserve insertion order, which is the tie-break order
    totals: Dict[str, int] = {}
    labels: Dict[str, str] = {}

    for entry in entries:
        seconds = duration_seconds(entry, now, clamp_negative=clamp_negative)
        group_id, label = key_function(entry, ctx)
        if group_id not in totals:
            totals[group_id] = 0
            labels[group_id] = label
        totals[group_id] += seconds

    grand_total = sum(totals.values())
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    groups = []
    for index, (group_id, seconds) in enumerate(ordered):
        percentage = (seconds / grand_total) * 100 if grand_total > 0 else 0.0
        groups.append(
            AggregateGroup(
                id=group_id,
                label=labels[group_id],
                total_seconds=seconds,
                percentage_of_total=percentage,
                color=color_for_group(group_id, index, palette),
            )
        )

    logger.info(
        f"Grouped {len(entries)} entries by {dimension.value} into "
        f"{len(groups)} groups ({grand_total} seconds)"
    )
    return groups


def summarize_groups(groups: Sequence[AggregateGroup]) -> GroupSummary:
    """Compute headline figures for grouped output.

    Example:
        >>> summarize_groups([]).top_group is None
        True
    """
    return GroupSummary(
        total_seconds=sum(g.total_seconds for g in groups),
        group_count=len(groups),
        top_group=groups[0] if groups else None,
    )
