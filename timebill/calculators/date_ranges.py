"""Date range calculations for period reports.

This module computes the equal-length preceding range used by period
comparisons, enumerates the calendar buckets touching a range, and resolves
the date presets offered by report screens. All functions take ``today``
explicitly instead of reading the clock.
"""

import datetime as dt
from typing import List

from timebill.calculators.time_utils import (
    WEEK_START_WEEKDAY,
    bucket_key,
    bucket_start,
    next_bucket_start,
)
from timebill.errors import UnknownDimensionError
from timebill.models.date_range import DateRange
from timebill.models.dimensions import BucketUnit

PRESETS = (
    "today",
    "yesterday",
    "this_week",
    "last_week",
    "this_month",
    "last_month",
)


def previous_range(current: DateRange) -> DateRange:
    """Compute the range of identical length immediately preceding ``current``.

    ``previous.end`` is the day before ``current.start`` and
    ``previous.end - previous.start == current.end - current.start``.

    Example:
        >>> prev = previous_range(
        ...     DateRange(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 16))
        ... )
        >>> (prev.start, prev.end)
        (datetime.date(2024, 6, 3), datetime.date(2024, 6, 9))
    """
    previous_end = current.start - dt.timedelta(days=1)
    previous_start = previous_end - current.length
    return DateRange(start=previous_start, end=previous_end)


def calendar_bucket_keys(date_range: DateRange, unit: BucketUnit) -> List[str]:
    """List the keys of every bucket that overlaps the range, in order.

    Partial buckets at either end count as whole buckets.

    Example:
        >>> calendar_bucket_keys(
        ...     DateRange(start=dt.date(2024, 5, 30), end=dt.date(2024, 6, 2)),
        ...     BucketUnit.MONTH,
        ... )
        ['2024-05', '2024-06']
    """
    keys = []
    cursor = bucket_start(date_range.start, unit)
    while cursor <= date_range.end:
        keys.append(bucket_key(cursor, unit))
        cursor = next_bucket_start(cursor, unit)
    return keys


def default_range(today: dt.date, days: int = 30) -> DateRange:
    """Return the default report range: the last ``days`` days up to today."""
    return DateRange(start=today - dt.timedelta(days=days), end=today)


def _week_of(day: dt.date) -> DateRange:
    start = day - dt.timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % 7)
    return DateRange(start=start, end=start + dt.timedelta(days=6))


def _month_of(day: dt.date) -> DateRange:
    start = day.replace(day=1)
    end = next_bucket_start(start, BucketUnit.MONTH) - dt.timedelta(days=1)
    return DateRange(start=start, end=end)


def preset_range(preset: str, today: dt.date) -> DateRange:
    """Resolve a named date preset relative to ``today``.

    Args:
        preset: One of ``PRESETS``
        today: Reference date

    Returns:
        The resolved DateRange

    Raises:
        UnknownDimensionError: If the preset name is not recognised

    Example:
        >>> preset_range("last_month", dt.date(2024, 3, 15)).end
        datetime.date(2024, 2, 29)
    """
    if preset == "today":
        return DateRange(start=today, end=today)
    if preset == "yesterday":
        yesterday = today - dt.timedelta(days=1)
        return DateRange(start=yesterday, end=yesterday)
    if preset == "this_week":
        return _week_of(today)
    if preset == "last_week":
        return _week_of(today - dt.timedelta(days=7))
    if preset == "this_month":
        return _month_of(today)
    if preset == "last_month":
        return _month_of(today.replace(day=1) - dt.timedelta(days=1))
    raise UnknownDimensionError(preset, PRESETS, kind="preset")
