"""Calculator modules for the aggregation engine."""

from timebill.calculators.billing_calculator import (
    Invoice,
    InvoiceLine,
    compute_invoice,
    find_missing_rates,
    floor_amount,
)
from timebill.calculators.colors import DEFAULT_PALETTE, color_for_group, fnv1a_32
from timebill.calculators.date_ranges import (
    calendar_bucket_keys,
    default_range,
    preset_range,
    previous_range,
)
from timebill.calculators.time_utils import (
    bucket_key,
    bucket_label,
    bucket_start,
    duration_seconds,
    format_duration,
    local_date,
    total_duration_seconds,
)

__all__ = [
    # billing_calculator
    "Invoice",
    "InvoiceLine",
    "compute_invoice",
    "find_missing_rates",
    "floor_amount",
    # colors
    "DEFAULT_PALETTE",
    "color_for_group",
    "fnv1a_32",
    # date_ranges
    "calendar_bucket_keys",
    "default_range",
    "preset_range",
    "previous_range",
    # time_utils
    "bucket_key",
    "bucket_label",
    "bucket_start",
    "duration_seconds",
    "format_duration",
    "local_date",
    "total_duration_seconds",
]
