"""Aggregators module for grouping, comparing and cross-tabulating entries."""

from timebill.aggregators.breakdown_matrix import generate_breakdown_matrix
from timebill.aggregators.entry_filters import filter_by_date_range, filter_entries
from timebill.aggregators.grouping import group_entries, group_key, summarize_groups
from timebill.aggregators.operation_report import (
    OperationReport,
    build_operation_report,
)
from timebill.aggregators.period_comparison import (
    BucketDelta,
    PeriodBucket,
    PeriodComparison,
    bucket_range,
    compare_periods,
    comparison_to_frame,
    percent_change,
)

__all__ = [
    "generate_breakdown_matrix",
    "filter_by_date_range",
    "filter_entries",
    "group_entries",
    "group_key",
    "summarize_groups",
    "OperationReport",
    "build_operation_report",
    "BucketDelta",
    "PeriodBucket",
    "PeriodComparison",
    "bucket_range",
    "compare_periods",
    "comparison_to_frame",
    "percent_change",
]
