"""Period comparison engine.

This module compares a date range against the equal-length range right
before it. Entries are bucketed by the calendar date of their start time
(entries are never split across buckets), totals and averages are computed
for both periods, and per-bucket deltas are paired by position so that e.g.
the first day of this week lines up with the first day of last week.

Averages need an explicit policy: summary tables divide by the buckets that
actually received time, charts divide by every calendar bucket and need a
zero-filled series. See ``AveragePolicy``.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from itertools import zip_longest
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from timebill.calculators.date_ranges import calendar_bucket_keys, previous_range
from timebill.calculators.time_utils import bucket_key, duration_seconds, local_date
from timebill.errors import DivisionUndefined
from timebill.models.date_range import DateRange
from timebill.models.dimensions import AveragePolicy, BucketUnit
from timebill.models.entry import TimeEntry

logger = logging.getLogger(__name__)

PercentChange = Union[float, DivisionUndefined]


@dataclass
class PeriodBucket:
    """Total time for one sub-interval of a range.

    Attributes:
        key: Bucket key (``yyyy-mm-dd``, week-start date or ``yyyy-mm``)
        total_seconds: Sum of durations of entries starting in the bucket
    """

    key: str
    total_seconds: int

    def to_dict(self) -> dict:
        return {"key": self.key, "total_seconds": self.total_seconds}


@dataclass
class BucketDelta:
    """Position-aligned pair of current and previous buckets.

    Either key is None when one period has more calendar buckets than the
    other (e.g. a 31-day range spanning two months against one spanning one).
    """

    current_key: Optional[str]
    previous_key: Optional[str]
    current_seconds: int
    previous_seconds: int

    @property
    def delta_seconds(self) -> int:
        return self.current_seconds - self.previous_seconds

    @property
    def percent_change(self) -> PercentChange:
        return percent_change(self.current_seconds, self.previous_seconds)

    def to_dict(self) -> dict:
        change = self.percent_change
        return {
            "current_key": self.current_key,
            "previous_key": self.previous_key,
            "current_seconds": self.current_seconds,
            "previous_seconds": self.previous_seconds,
            "delta_seconds": self.delta_seconds,
            "percent_change": change.to_dict()
            if isinstance(change, DivisionUndefined)
            else change,
        }


@dataclass
class PeriodComparison:
    """Comparison of a range with the equal-length range preceding it.

    Attributes:
        current_range: The requested range
        previous_range: The preceding range of identical length
        bucket_unit: Bucket size used for both series
        average_policy: How the averages were computed
        current_buckets: Buckets of the current range, chronological
        previous_buckets: Buckets of the previous range, chronological
        current_total: Seconds recorded in the current range
        previous_total: Seconds recorded in the previous range
        current_average: Average seconds per bucket, current range
        previous_average: Average seconds per bucket, previous range
    """

    current_range: DateRange
    previous_range: DateRange
    bucket_unit: BucketUnit
    average_policy: AveragePolicy
    current_buckets: List[PeriodBucket]
    previous_buckets: List[PeriodBucket]
    current_total: int
    previous_total: int
    current_average: float
    previous_average: float

    @property
    def percent_change(self) -> PercentChange:
        """Change of the current total relative to the previous total."""
        return percent_change(self.current_total, self.previous_total)

    def bucket_deltas(self) -> List[BucketDelta]:
        """Pair the calendar buckets of both ranges by position."""
        current = _totals_by_key(self.current_buckets)
        previous = _totals_by_key(self.previous_buckets)
        current_keys = calendar_bucket_keys(self.current_range, self.bucket_unit)
        previous_keys = calendar_bucket_keys(self.previous_range, self.bucket_unit)

        return [
            BucketDelta(
                current_key=current_key,
                previous_key=previous_key,
                current_seconds=current.get(current_key, 0) if current_key else 0,
                previous_seconds=previous.get(previous_key, 0) if previous_key else 0,
            )
            for current_key, previous_key in zip_longest(current_keys, previous_keys)
        ]

    def to_dict(self) -> dict:
        change = self.percent_change
        return {
            "current_range": self.current_range.to_dict(),
            "previous_range": self.previous_range.to_dict(),
            "bucket_unit": self.bucket_unit.value,
            "average_policy": self.average_policy.value,
            "current_buckets": [b.to_dict() for b in self.current_buckets],
            "previous_buckets": [b.to_dict() for b in self.previous_buckets],
            "current_total": self.current_total,
            "previous_total": self.previous_total,
            "current_average": self.current_average,
            "previous_average": self.previous_average,
            "percent_change": change.to_dict()
            if isinstance(change, DivisionUndefined)
            else change,
        }


def percent_change(current: float, previous: float) -> PercentChange:
    """Calculate (current - previous) / previous × 100.

    Returns:
        The change in percent, or DivisionUndefined when previous is 0

    Example:
        >>> percent_change(150, 100)
        50.0
        >>> percent_change(10, 0)
        DivisionUndefined(current=10, previous=0)
    """
    if previous == 0:
        return DivisionUndefined(current=current, previous=previous)
    return (current - previous) / previous * 100


def _totals_by_key(buckets: Sequence[PeriodBucket]) -> Dict[str, int]:
    return {bucket.key: bucket.total_seconds for bucket in buckets}


def bucket_range(
    entries: Sequence[TimeEntry],
    date_range: DateRange,
    bucket_unit: Union[BucketUnit, str],
    now: dt.datetime,
    zero_fill: bool = False,
    tz: Optional[dt.tzinfo] = None,
    clamp_negative: bool = False,
) -> List[PeriodBucket]:
    """Bucket the entries whose start date falls inside a range.

    Args:
        entries: Time entries (entries outside the range are ignored)
        date_range: Inclusive date range
        bucket_unit: Bucket size
        now: Reference instant for running entries
        zero_fill: Include every calendar bucket, with 0 for empty ones
        tz: Reporting timezone for aware instants
        clamp_negative: Clamp negative durations to 0 instead of raising

    Returns:
        Buckets in chronological order

    Raises:
        InvalidRangeError: If an entry inside the range has a negative duration
    """
    unit = BucketUnit.parse(bucket_unit)
    totals: Dict[str, int] = {}

    for entry in entries:
        day = local_date(entry.start_time, tz)
        if not date_range.contains(day):
            continue
        key = bucket_key(day, unit)
        totals[key] = totals.get(key, 0) + duration_seconds(
            entry, now, clamp_negative=clamp_negative
        )

    if zero_fill:
        keys = calendar_bucket_keys(date_range, unit)
    else:
        keys = sorted(totals)

    return [PeriodBucket(key=key, total_seconds=totals.get(key, 0)) for key in keys]


def _average(total: int, bucket_count: int) -> float:
    return total / bucket_count if bucket_count > 0 else 0.0


def compare_periods(
    entries: Sequence[TimeEntry],
    date_range: DateRange,
    bucket_unit: Union[BucketUnit, str],
    now: dt.datetime,
    average_policy: Union[AveragePolicy, str],
    tz: Optional[dt.tzinfo] = None,
    clamp_negative: bool = False,
) -> PeriodComparison:
    """Compare a date range with the equal-length range right before it.

    Args:
        entries: Time entries covering both ranges (not modified)
        date_range: The current range
        bucket_unit: Bucket size (day, week or month)
        now: Reference instant for running entries
        average_policy: NON_EMPTY or CALENDAR; see AveragePolicy
        tz: Reporting timezone for aware instants
        clamp_negative: Clamp negative durations to 0 instead of raising

    Returns:
        PeriodComparison for both ranges

    Raises:
        UnknownDimensionError: If the bucket unit or policy is not recognised
        InvalidRangeError: If an entry in either range has a negative duration

    Example:
        >>> week = DateRange(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 16))
        >>> result = compare_periods([], week, "day", dt.datetime(2024, 6, 17),
        ...                          AveragePolicy.CALENDAR)
        >>> (len(result.current_buckets), result.previous_range.start)
        (7, datetime.date(2024, 6, 3))
    """
    unit = BucketUnit.parse(bucket_unit)
    policy = AveragePolicy.parse(average_policy)
    previous = previous_range(date_range)
    zero_fill = policy is AveragePolicy.CALENDAR

    logger.debug(
        f"Comparing {date_range.start}..{date_range.end} with "
        f"{previous.start}..{previous.end} by {unit.value} ({policy.value})"
    )

    current_buckets = bucket_range(
        entries, date_range, unit, now, zero_fill, tz, clamp_negative
    )
    previous_buckets = bucket_range(
        entries, previous, unit, now, zero_fill, tz, clamp_negative
    )

    current_total = sum(b.total_seconds for b in current_buckets)
    previous_total = sum(b.total_seconds for b in previous_buckets)

    # Zero-filled series already hold exactly the calendar buckets
    current_average = _average(current_total, len(current_buckets))
    previous_average = _average(previous_total, len(previous_buckets))

    logger.info(
        f"Period comparison: current={current_total}s in "
        f"{len(current_buckets)} buckets, previous={previous_total}s in "
        f"{len(previous_buckets)} buckets"
    )

    return PeriodComparison(
        current_range=date_range,
        previous_range=previous,
        bucket_unit=unit,
        average_policy=policy,
        current_buckets=current_buckets,
        previous_buckets=previous_buckets,
        current_total=current_total,
        previous_total=previous_total,
        current_average=current_average,
        previous_average=previous_average,
    )


def comparison_to_frame(comparison: PeriodComparison) -> pd.DataFrame:
    """Convert a comparison into a position-aligned DataFrame for charts.

    Columns: current_key, previous_key, current_seconds, previous_seconds,
    delta_seconds. One row per calendar bucket position.

    Example:
        >>> frame = comparison_to_frame(result)
        >>> list(frame.columns)[:2]
        ['current_key', 'previous_key']
    """
    rows = [
        {
            "current_key": d.current_key,
            "previous_key": d.previous_key,
            "current_seconds": d.current_seconds,
            "previous_seconds": d.previous_seconds,
            "delta_seconds": d.delta_seconds,
        }
        for d in comparison.bucket_deltas()
    ]
    columns = [
        "current_key",
        "previous_key",
        "current_seconds",
        "previous_seconds",
        "delta_seconds",
    ]
    frame = pd.DataFrame(rows, columns=columns)

    logger.debug(f"Built comparison frame with {len(frame)} rows")
    return frame
