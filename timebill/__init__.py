"""timebill: time-entry aggregation and billing engine.

Pure computations over already-fetched time entries:
- grouped, percentage-weighted summaries (``group_entries``)
- period-over-period comparisons (``compare_periods``)
- invoice totals with tax (``compute_invoice``)
"""

from timebill.aggregators.grouping import group_entries, summarize_groups
from timebill.aggregators.period_comparison import compare_periods, percent_change
from timebill.calculators.billing_calculator import compute_invoice
from timebill.calculators.time_utils import duration_seconds
from timebill.errors import (
    DivisionUndefined,
    EngineError,
    InvalidRangeError,
    MissingRateError,
    TimezoneMismatchError,
    UnknownDimensionError,
)
from timebill.models import (
    AveragePolicy,
    BucketUnit,
    DateRange,
    GroupDimension,
    Project,
    ReferenceData,
    TimeEntry,
)

__version__ = "1.0.0"

__all__ = [
    "AveragePolicy",
    "BucketUnit",
    "DateRange",
    "DivisionUndefined",
    "EngineError",
    "GroupDimension",
    "InvalidRangeError",
    "MissingRateError",
    "Project",
    "ReferenceData",
    "TimeEntry",
    "TimezoneMismatchError",
    "UnknownDimensionError",
    "compare_periods",
    "compute_invoice",
    "duration_seconds",
    "group_entries",
    "percent_change",
    "summarize_groups",
]
