"""Time calculation utilities for the aggregation engine.

This module provides the low-level building blocks every aggregate is built
on:
- Normalizing an entry into a whole number of seconds (the duration normalizer)
- Converting instants to local calendar dates
- Flooring dates to day/week/month bucket boundaries and rendering their keys
- Formatting durations as HH:MM:SS

None of these functions read the system clock; running entries are measured
against the ``now`` passed in by the caller.
"""

import datetime as dt
from typing import Callable, Dict, Iterable, Optional

from timebill.errors import InvalidRangeError, TimezoneMismatchError
from timebill.models.dimensions import BucketUnit
from timebill.models.entry import TimeEntry

# Weeks start on Monday (ISO 8601) everywhere in the engine.
WEEK_START_WEEKDAY = 0

_ONE_SECOND = dt.timedelta(seconds=1)


def duration_seconds(
    entry: TimeEntry, now: dt.datetime, clamp_negative: bool = False
) -> int:
    """Calculate the duration of an entry in whole seconds.

    The raw interval is floored to whole seconds and the entry's break is
    deducted. Running entries are measured up to ``now``.

    Args:
        entry: The time entry to measure
        now: Reference instant for running entries
        clamp_negative: Return 0 instead of raising for negative durations

    Returns:
        Duration in seconds (>= 0)

    Raises:
        InvalidRangeError: If the duration is negative and clamping was not
            requested
        TimezoneMismatchError: If the entry is running and ``now`` disagrees
            with its start_time on timezone awareness

    Example:
        >>> entry = TimeEntry(id="e1", start_time=dt.datetime(2024, 6, 3, 9, 0))
        >>> duration_seconds(entry, now=dt.datetime(2024, 6, 3, 10, 30))
        5400
    """
    if entry.end_time is None:
        if (now.tzinfo is None) != (entry.start_time.tzinfo is None):
            raise TimezoneMismatchError(entry.id, entry.start_time, now)
        end_time = now
    else:
        end_time = entry.end_time
    seconds = (end_time - entry.start_time) // _ONE_SECOND
    seconds -= entry.break_minutes * 60

    if seconds < 0:
        if clamp_negative:
            return 0
        raise InvalidRangeError(entry.id, entry.start_time, end_time, seconds)

    return seconds


def total_duration_seconds(
    entries: Iterable[TimeEntry], now: dt.datetime, clamp_negative: bool = False
) -> int:
    """Sum the normalized durations of all entries.

    Example:
        >>> total_duration_seconds([], now=dt.datetime(2024, 1, 1))
        0
    """
    return sum(duration_seconds(e, now, clamp_negative) for e in entries)


def format_duration(total_seconds: int) -> str:
    """Format seconds as HH:MM:SS (hours are not wrapped at 24).

    Example:
        >>> format_duration(5400)
        '01:30:00'
        >>> format_duration(93784)
        '26:03:04'
    """
    hours, remainder = divmod(int(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def local_date(instant: dt.datetime, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """Return the calendar date of an instant in the reporting timezone.

    Aware instants are converted to ``tz`` first; naive instants are taken
    to already be in local time.

    Example:
        >>> local_date(dt.datetime(2024, 6, 3, 23, 30, tzinfo=dt.timezone.utc),
        ...            dt.timezone(dt.timedelta(hours=9)))
        datetime.date(2024, 6, 4)
    """
    if instant.tzinfo is not None and tz is not None:
        instant = instant.astimezone(tz)
    return instant.date()


def _floor_day(day: dt.date) -> dt.date:
    return day


def _floor_week(day: dt.date) -> dt.date:
    return day - dt.timedelta(days=(day.weekday() - WEEK_START_WEEKDAY) % 7)


def _floor_month(day: dt.date) -> dt.date:
    return day.replace(day=1)


def _next_day(start: dt.date) -> dt.date:
    return start + dt.timedelta(days=1)


def _next_week(start: dt.date) -> dt.date:
    return start + dt.timedelta(days=7)


def _next_month(start: dt.date) -> dt.date:
    if start.month == 12:
        return dt.date(start.year + 1, 1, 1)
    return dt.date(start.year, start.month + 1, 1)


_FLOOR: Dict[BucketUnit, Callable[[dt.date], dt.date]] = {
    BucketUnit.DAY: _floor_day,
    BucketUnit.WEEK: _floor_week,
    BucketUnit.MONTH: _floor_month,
}

_NEXT: Dict[BucketUnit, Callable[[dt.date], dt.date]] = {
    BucketUnit.DAY: _next_day,
    BucketUnit.WEEK: _next_week,
    BucketUnit.MONTH: _next_month,
}

_KEY_FORMAT: Dict[BucketUnit, str] = {
    BucketUnit.DAY: "%Y-%m-%d",
    BucketUnit.WEEK: "%Y-%m-%d",
    BucketUnit.MONTH: "%Y-%m",
}

_LABEL_FORMAT: Dict[BucketUnit, str] = {
    BucketUnit.DAY: "%Y/%m/%d",
    BucketUnit.WEEK: "Week of %Y/%m/%d",
    BucketUnit.MONTH: "%Y/%m",
}


def bucket_start(day: dt.date, unit: BucketUnit) -> dt.date:
    """Floor a date to the start of its bucket.

    Example:
        >>> bucket_start(dt.date(2024, 6, 6), BucketUnit.WEEK)  # Thursday
        datetime.date(2024, 6, 3)
        >>> bucket_start(dt.date(2024, 6, 6), BucketUnit.MONTH)
        datetime.date(2024, 6, 1)
    """
    return _FLOOR[unit](day)


def next_bucket_start(start: dt.date, unit: BucketUnit) -> dt.date:
    """Return the first day of the bucket following the one at ``start``."""
    return _NEXT[unit](start)


def bucket_key(day: dt.date, unit: BucketUnit) -> str:
    """Return the bucket key of a date.

    Keys are ``yyyy-mm-dd`` for days, the week-start date for weeks and
    ``yyyy-mm`` for months, so they sort chronologically as strings.

    Example:
        >>> bucket_key(dt.date(2024, 6, 6), BucketUnit.WEEK)
        '2024-06-03'
    """
    return bucket_start(day, unit).strftime(_KEY_FORMAT[unit])


def bucket_label(day: dt.date, unit: BucketUnit) -> str:
    """Return a human-readable label for the bucket containing a date.

    Example:
        >>> bucket_label(dt.date(2024, 6, 6), BucketUnit.WEEK)
        'Week of 2024/06/03'
    """
    return bucket_start(day, unit).strftime(_LABEL_FORMAT[unit])
