"""Validation report for collecting problems in entry sets and rate tables."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """Represents a single validation issue.

    Attributes:
        severity: The severity level of the issue
        code: Machine-readable issue code (e.g. "InvalidRange")
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Optional context information (e.g. entry_id, group_id)
    """

    severity: ValidationSeverity
    code: str
    message: str
    value: Any = None
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"

        return f"[{self.severity.name}] {self.code}: {self.message}{context_str}"

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.name,
            "code": self.code,
            "message": self.message,
            "value": None if self.value is None else str(self.value),
            "context": self.context or {},
        }


class ValidationReport:
    """Collects validation issues instead of stopping at the first one.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("InvalidRange", "End before start", -60,
        ...                  {"entry_id": "e1"})
        >>> report.add_info("RunningEntry", "Entry is still running", None)
        >>> report.is_valid()
        False
        >>> report.summary()
        '1 error(s), 1 info message(s)'
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """Check if validation passed (warnings and info do not count)."""
        return self.error_count == 0

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        code: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an issue of the given severity.

        Args:
            severity: Issue severity
            code: Machine-readable issue code
            message: Human-readable description
            value: The value that caused the issue
            context: Optional context information
        """
        self.issues.append(
            ValidationIssue(
                severity=severity,
                code=code,
                message=message,
                value=value,
                context=context,
            )
        )

    def add_error(self, code, message, value=None, context=None) -> None:
        self.add(ValidationSeverity.ERROR, code, message, value, context)

    def add_warning(self, code, message, value=None, context=None) -> None:
        self.add(ValidationSeverity.WARNING, code, message, value, context)

    def add_info(self, code, message, value=None, context=None) -> None:
        self.add(ValidationSeverity.INFO, code, message, value, context)

    def get_errors(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.WARNING)

    def get_issues(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    def get_by_code(self, code: str) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.code == code]

    def merge(self, other: "ValidationReport") -> None:
        """Merge another validation report into this one."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Get a summary with counts of errors, warnings and info messages."""
        parts = []
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count > 0:
            parts.append(f"{self.info_count} info message(s)")

        if not parts:
            return "No issues found"

        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display."""
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]

        for severity, title in (
            (ValidationSeverity.ERROR, "ERRORS"),
            (ValidationSeverity.WARNING, "WARNINGS"),
            (ValidationSeverity.INFO, "INFO"),
        ):
            issues = self.get_issues(severity)
            if issues:
                lines.append(f"\n{title}:")
                for issue in issues:
                    lines.append(f"  - {issue}")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "valid": self.is_valid(),
            "summary": self.summary(),
            "issues": [issue.to_dict() for issue in self.issues],
        }
