"""Two-dimensional breakdown matrices.

This module cross-tabulates entries along two grouping dimensions, e.g.
projects by month for the monthly distribution chart, and returns a pandas
DataFrame with one row per row-group and one column per column-group.
"""

import datetime as dt
import logging
from collections import Counter, defaultdict
from typing import Dict, Optional, Sequence, Union

import pandas as pd

from timebill.aggregators.grouping import group_key
from timebill.calculators.time_utils import duration_seconds
from timebill.models.aggregates import DEFAULT_UNASSIGNED_LABEL
from timebill.models.dimensions import GroupDimension
from timebill.models.entry import ReferenceData, TimeEntry

logger = logging.getLogger(__name__)


def _unique_labels(labels: Dict[str, str]) -> Dict[str, str]:
    """Map group ids to labels, suffixing the id where labels collide."""
    counts = Counter(labels.values())
    return {
        group_id: label if counts[label] == 1 else f"{label} ({group_id})"
        for group_id, label in labels.items()
    }


def generate_breakdown_matrix(
    entries: Sequence[TimeEntry],
    rows: Union[GroupDimension, str],
    columns: Union[GroupDimension, str],
    now: dt.datetime,
    reference: Optional[ReferenceData] = None,
    tz: Optional[dt.tzinfo] = None,
    unassigned_label: str = DEFAULT_UNASSIGNED_LABEL,
    use_labels: bool = True,
    clamp_negative: bool = False,
) -> pd.DataFrame:
    """Cross-tabulate total seconds along two dimensions.

    Calendar columns are sorted chronologically; other axes keep encounter
    order. Cells without time are 0. When two groups share a label, both
    are suffixed with their id (e.g. "Site (P1)" and "Site (P2)") so every
    index and column entry stays unique.

    Args:
        entries: Time entries (not modified)
        rows: Dimension for the index
        columns: Dimension for the columns
        now: Reference instant for running entries
        reference: Lookup tables for labels and team association
        tz: Reporting timezone for calendar dimensions
        unassigned_label: Label of the sentinel group
        use_labels: Use group labels instead of ids for index and columns
        clamp_negative: Clamp negative durations to 0 instead of raising

    Returns:
        DataFrame of integer seconds (empty when there are no entries)

    Raises:
        UnknownDimensionError: If either dimension is not recognised
        InvalidRangeError: If an entry has a negative duration

    Example:
        >>> matrix = generate_breakdown_matrix(entries, "project", "month", now)
        >>> matrix.loc["Website", "2024/06"]
        14400
    """
    row_dimension = GroupDimension.parse(rows)
    column_dimension = GroupDimension.parse(columns)
    reference = reference or ReferenceData()

    logger.info(
        f"Generating {row_dimension.value} x {column_dimension.value} matrix "
        f"from {len(entries)} entries"
    )

    if not entries:
        logger.info("No entries, returning empty DataFrame")
        return pd.DataFrame()

    cells: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    row_labels: Dict[str, str] = {}
    column_labels: Dict[str, str] = {}

    for entry in entries:
        seconds = duration_seconds(entry, now, clamp_negative=clamp_negative)
        row_id, row_label = group_key(
            entry, row_dimension, reference, tz, unassigned_label
        )
        column_id, column_label = group_key(
            entry, column_dimension, reference, tz, unassigned_label
        )
        row_labels.setdefault(row_id, row_label)
        column_labels.setdefault(column_id, column_label)
        cells[row_id][column_id] += seconds

    column_ids = list(column_labels)
    if column_dimension.bucket_unit is not None:
        # Bucket keys sort chronologically as strings
        column_ids.sort()

    df = pd.DataFrame(
        [[cells[r].get(c, 0) for c in column_ids] for r in row_labels],
        index=list(row_labels),
        columns=column_ids,
    )

    if use_labels:
        df = df.rename(
            index=_unique_labels(row_labels), columns=_unique_labels(column_labels)
        )

    logger.info(f"Generated matrix with {len(df)} rows and {len(df.columns)} columns")
    return df
