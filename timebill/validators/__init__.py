"""Validation layer collecting problems in entry sets and rate tables."""

from timebill.validators.entry_validator import EntryValidator
from timebill.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "EntryValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
]
