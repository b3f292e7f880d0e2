"""Unit tests for the period comparison engine."""

import datetime as dt

import pytest

from timebill.aggregators.period_comparison import (
    bucket_range,
    compare_periods,
    comparison_to_frame,
    percent_change,
)
from timebill.errors import DivisionUndefined, InvalidRangeError, UnknownDimensionError
from timebill.models import AveragePolicy, BucketUnit, DateRange, TimeEntry

UTC = dt.timezone.utc

THIS_WEEK = DateRange(start=dt.date(2024, 6, 10), end=dt.date(2024, 6, 16))
LAST_WEEK = DateRange(start=dt.date(2024, 6, 3), end=dt.date(2024, 6, 9))


def entry_on(day, hours, entry_id=None):
    start = dt.datetime.combine(day, dt.time(9, 0), tzinfo=UTC)
    return TimeEntry(
        id=entry_id or f"e-{day.isoformat()}-{hours}",
        start_time=start,
        end_time=start + dt.timedelta(hours=hours),
    )


class TestPercentChange:
    """Test percent change and the zero baseline."""

    def test_increase(self):
        """Test a 50% increase."""
        assert percent_change(150, 100) == pytest.approx(50.0)

    def test_decrease(self):
        """Test a 25% decrease."""
        assert percent_change(75, 100) == pytest.approx(-25.0)

    def test_zero_baseline_is_undefined(self):
        """Test that a zero baseline is reported as a value, not infinity."""
        result = percent_change(10, 0)

        assert isinstance(result, DivisionUndefined)
        assert result.current == 10
        assert str(result) == "N/A"

    def test_zero_over_zero_is_undefined(self):
        """Test that no time in either period is also undefined."""
        assert isinstance(percent_change(0, 0), DivisionUndefined)


class TestComparePeriods:
    """Test current-versus-previous comparisons."""

    def test_empty_previous_period(self, sample_entries, now):
        """Test a week with data against an empty previous week."""
        result = compare_periods(
            sample_entries, THIS_WEEK, BucketUnit.DAY, now, AveragePolicy.NON_EMPTY
        )

        assert result.previous_range == LAST_WEEK
        assert result.current_total == 16200
        assert result.previous_total == 0
        assert isinstance(result.percent_change, DivisionUndefined)

    def test_non_empty_average(self, sample_entries, now):
        """Test that NON_EMPTY divides by buckets that received time."""
        result = compare_periods(
            sample_entries, THIS_WEEK, "day", now, AveragePolicy.NON_EMPTY
        )

        assert [b.key for b in result.current_buckets] == [
            "2024-06-10",
            "2024-06-11",
            "2024-06-12",
            "2024-06-13",
        ]
        assert result.current_average == pytest.approx(16200 / 4)
        assert result.previous_buckets == []
        assert result.previous_average == 0.0

    def test_calendar_average(self, sample_entries, now):
        """Test that CALENDAR zero-fills and divides by every bucket."""
        result = compare_periods(sample_entries, THIS_WEEK, "day", now, "calendar")

        assert len(result.current_buckets) == 7
        assert len(result.previous_buckets) == 7
        assert result.current_buckets[-1].total_seconds == 0
        assert result.current_average == pytest.approx(16200 / 7)
        assert result.previous_average == 0.0

    def test_previous_total_matches_shifted_current(self, now):
        """Test that the previous period is measured like a current one."""
        entries = [
            entry_on(dt.date(2024, 6, 4), 2),
            entry_on(dt.date(2024, 6, 9), 1),
            entry_on(dt.date(2024, 6, 12), 3),
        ]

        this_week = compare_periods(entries, THIS_WEEK, "day", now, "non_empty")
        last_week = compare_periods(entries, LAST_WEEK, "day", now, "non_empty")

        assert this_week.previous_total == last_week.current_total == 3 * 3600
        assert this_week.current_total == 3 * 3600
        assert this_week.percent_change == pytest.approx(0.0)

    def test_entries_outside_both_ranges_ignored(self, now):
        """Test that only the two ranges are counted."""
        entries = [
            entry_on(dt.date(2024, 5, 1), 5),
            entry_on(dt.date(2024, 6, 10), 1),
        ]

        result = compare_periods(entries, THIS_WEEK, "day", now, "non_empty")

        assert result.current_total == 3600
        assert result.previous_total == 0

    def test_week_buckets(self, now):
        """Test weekly buckets over a two-week range."""
        entries = [
            entry_on(dt.date(2024, 6, 3), 1),
            entry_on(dt.date(2024, 6, 12), 2),
        ]
        two_weeks = DateRange(start=dt.date(2024, 6, 3), end=dt.date(2024, 6, 16))

        result = compare_periods(entries, two_weeks, "week", now, "calendar")

        assert [(b.key, b.total_seconds) for b in result.current_buckets] == [
            ("2024-06-03", 3600),
            ("2024-06-10", 7200),
        ]
        assert result.previous_range.start == dt.date(2024, 5, 20)

    def test_entry_spanning_midnight_stays_in_start_bucket(self, now):
        """Test that entries are attributed to the day they start."""
        entry = TimeEntry(
            id="late",
            start_time=dt.datetime(2024, 6, 10, 23, 0, tzinfo=UTC),
            end_time=dt.datetime(2024, 6, 11, 1, 0, tzinfo=UTC),
        )

        result = compare_periods([entry], THIS_WEEK, "day", now, "non_empty")

        assert [(b.key, b.total_seconds) for b in result.current_buckets] == [
            ("2024-06-10", 7200)
        ]

    def test_invalid_entry_raises(self, now):
        """Test that negative durations abort the comparison."""
        bad = TimeEntry(
            id="bad",
            start_time=dt.datetime(2024, 6, 10, 10, 0, tzinfo=UTC),
            end_time=dt.datetime(2024, 6, 10, 9, 0, tzinfo=UTC),
        )

        with pytest.raises(InvalidRangeError):
            compare_periods([bad], THIS_WEEK, "day", now, "non_empty")

        result = compare_periods(
            [bad], THIS_WEEK, "day", now, "non_empty", clamp_negative=True
        )
        assert result.current_total == 0

    def test_unknown_unit_and_policy(self, now):
        """Test that unknown bucket units and policies fail fast."""
        with pytest.raises(UnknownDimensionError):
            compare_periods([], THIS_WEEK, "year", now, "non_empty")
        with pytest.raises(UnknownDimensionError):
            compare_periods([], THIS_WEEK, "day", now, "median")

    def test_to_dict_reports_undefined_change(self, sample_entries, now):
        """Test serialization of a zero baseline."""
        result = compare_periods(sample_entries, THIS_WEEK, "day", now, "non_empty")

        data = result.to_dict()

        assert data["percent_change"]["error"] == "DivisionUndefined"
        assert data["current_range"] == {"start": "2024-06-10", "end": "2024-06-16"}
        assert data["average_policy"] == "non_empty"


class TestBucketDeltas:
    """Test position-aligned deltas."""

    def test_daily_deltas_align_by_position(self, now):
        """Test that Monday lines up with the previous Monday."""
        entries = [
            entry_on(dt.date(2024, 6, 3), 1),
            entry_on(dt.date(2024, 6, 10), 3),
        ]

        result = compare_periods(entries, THIS_WEEK, "day", now, "non_empty")
        deltas = result.bucket_deltas()

        assert len(deltas) == 7
        first = deltas[0]
        assert (first.current_key, first.previous_key) == ("2024-06-10", "2024-06-03")
        assert first.delta_seconds == 7200
        assert first.percent_change == pytest.approx(200.0)
        assert isinstance(deltas[1].percent_change, DivisionUndefined)

    def test_uneven_month_buckets(self, now):
        """Test that unmatched positions are paired with None."""
        march = DateRange(start=dt.date(2024, 3, 1), end=dt.date(2024, 3, 31))

        result = compare_periods([], march, "month", now, "calendar")
        deltas = result.bucket_deltas()

        # Previous range 2024-01-30..2024-02-29 touches two months
        assert [(d.current_key, d.previous_key) for d in deltas] == [
            ("2024-03", "2024-01"),
            (None, "2024-02"),
        ]

    def test_comparison_to_frame(self, sample_entries, now):
        """Test the chart DataFrame."""
        result = compare_periods(sample_entries, THIS_WEEK, "day", now, "calendar")

        frame = comparison_to_frame(result)

        assert list(frame.columns) == [
            "current_key",
            "previous_key",
            "current_seconds",
            "previous_seconds",
            "delta_seconds",
        ]
        assert len(frame) == 7
        assert frame["current_seconds"].sum() == 16200
        assert frame["delta_seconds"].sum() == 16200


class TestBucketRange:
    """Test bucketing of one range."""

    def test_zero_fill(self):
        """Test calendar buckets with and without zero filling."""
        entries = [entry_on(dt.date(2024, 6, 12), 1)]
        now = dt.datetime(2024, 6, 20, tzinfo=UTC)

        sparse = bucket_range(entries, THIS_WEEK, "day", now)
        filled = bucket_range(entries, THIS_WEEK, "day", now, zero_fill=True)

        assert [b.key for b in sparse] == ["2024-06-12"]
        assert len(filled) == 7
        assert sum(b.total_seconds for b in filled) == 3600
