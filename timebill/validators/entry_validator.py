"""Validator for entry sets and rate tables.

The engine functions stop at the first invalid entry. Before running a
report or an invoice, callers can use EntryValidator to collect every
problem at once and present them together.
"""

import datetime as dt
import logging
from typing import Mapping, Optional, Sequence

from timebill.calculators.billing_calculator import (
    Number,
    find_missing_rates,
    to_decimal,
)
from timebill.calculators.time_utils import duration_seconds
from timebill.errors import InvalidRangeError, TimezoneMismatchError
from timebill.models.aggregates import AggregateGroup
from timebill.models.entry import TimeEntry
from timebill.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

INVALID_RANGE = "InvalidRange"
MISSING_RATE = "MissingRate"
RUNNING_ENTRY = "RunningEntry"
MISSING_PROJECT = "MissingProject"
MISSING_USER = "MissingUser"
DUPLICATE_ENTRY = "DuplicateEntry"
NEGATIVE_RATE = "NegativeRate"
INVALID_RATE = "InvalidRate"
TIMEZONE_MISMATCH = "TimezoneMismatch"


class EntryValidator:
    """Checks entries and rate tables, collecting issues in a report.

    Example:
        >>> validator = EntryValidator()
        >>> report = validator.validate_entries(entries, now=now)
        >>> if not report.is_valid():
        ...     print(report.format())
    """

    def validate_entry(
        self,
        entry: TimeEntry,
        now: dt.datetime,
        report: Optional[ValidationReport] = None,
    ) -> ValidationReport:
        """Validate a single entry.

        Args:
            entry: The entry to validate
            now: Reference instant for running entries
            report: Report to add issues to (a new one when omitted)

        Returns:
            The report holding the issues found
        """
        report = report if report is not None else ValidationReport()
        context = {"entry_id": entry.id}

        try:
            duration_seconds(entry, now)
        except InvalidRangeError as e:
            report.add_error(INVALID_RANGE, str(e), e.seconds, context)
        except TimezoneMismatchError as e:
            report.add_error(TIMEZONE_MISMATCH, str(e), e.start_time, context)

        if entry.is_running:
            report.add_info(
                RUNNING_ENTRY,
                f"Entry is still running; measured up to {now.isoformat()}",
                entry.start_time,
                context,
            )
        if entry.project_id is None:
            report.add_warning(
                MISSING_PROJECT,
                "Entry has no project and will be unassigned",
                None,
                context,
            )
        if entry.user_id is None:
            report.add_warning(
                MISSING_USER, "Entry has no user and will be unassigned", None, context
            )

        return report

    def validate_entries(
        self, entries: Sequence[TimeEntry], now: dt.datetime
    ) -> ValidationReport:
        """Validate every entry and check for duplicate ids.

        Returns:
            ValidationReport with all issues found across all entries
        """
        report = ValidationReport()
        seen = set()

        for entry in entries:
            if entry.id in seen:
                report.add_warning(
                    DUPLICATE_ENTRY,
                    "Entry id appears more than once",
                    entry.id,
                    {"entry_id": entry.id},
                )
            seen.add(entry.id)
            self.validate_entry(entry, now, report)

        logger.info(f"Validated {len(entries)} entries: {report.summary()}")
        return report

    def validate_rates(
        self,
        groups: Sequence[AggregateGroup],
        rates_by_group: Mapping[str, Number],
    ) -> ValidationReport:
        """Report every group without a rate and every invalid or negative rate."""
        report = ValidationReport()

        for group_id in find_missing_rates(groups, rates_by_group):
            report.add_error(
                MISSING_RATE,
                f"No billing rate configured for group '{group_id}'",
                None,
                {"group_id": group_id},
            )

        for group_id, rate in rates_by_group.items():
            try:
                value = to_decimal(rate)
            except ValueError as e:
                report.add_error(INVALID_RATE, str(e), rate, {"group_id": group_id})
                continue
            if value < 0:
                report.add_error(
                    NEGATIVE_RATE,
                    "Rate must not be negative",
                    rate,
                    {"group_id": group_id},
                )

        logger.info(f"Validated rates for {len(groups)} groups: {report.summary()}")
        return report
