"""Tests for validation report functionality."""

from timebill.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)


class TestValidationSeverity:
    """Tests for ValidationSeverity enum."""

    def test_severity_order(self):
        """Test that severity levels can be compared."""
        assert ValidationSeverity.ERROR > ValidationSeverity.WARNING
        assert ValidationSeverity.WARNING > ValidationSeverity.INFO


class TestValidationIssue:
    """Tests for ValidationIssue data class."""

    def test_str_includes_context(self):
        """Test the display form of an issue."""
        issue = ValidationIssue(
            severity=ValidationSeverity.ERROR,
            code="InvalidRange",
            message="End before start",
            value=-60,
            context={"entry_id": "e1"},
        )

        assert str(issue) == "[ERROR] InvalidRange: End before start (entry_id=e1)"

    def test_str_without_context(self):
        """Test the display form without context."""
        issue = ValidationIssue(ValidationSeverity.INFO, "RunningEntry", "Running")

        assert str(issue) == "[INFO] RunningEntry: Running"

    def test_to_dict(self):
        """Test JSON-safe serialization."""
        issue = ValidationIssue(
            ValidationSeverity.WARNING, "MissingUser", "No user", None, {"entry_id": "e2"}
        )

        assert issue.to_dict() == {
            "severity": "WARNING",
            "code": "MissingUser",
            "message": "No user",
            "value": None,
            "context": {"entry_id": "e2"},
        }


class TestValidationReport:
    """Tests for ValidationReport class."""

    def test_empty_report_is_valid(self):
        """Test a report without issues."""
        report = ValidationReport()

        assert report.is_valid()
        assert not report.has_errors()
        assert report.summary() == "No issues found"
        assert report.format() == "Validation successful - no issues found"

    def test_warnings_do_not_invalidate(self):
        """Test that only errors make a report invalid."""
        report = ValidationReport()
        report.add_warning("MissingProject", "No project")
        report.add_info("RunningEntry", "Running")

        assert report.is_valid()
        assert report.warning_count == 1
        assert report.info_count == 1

    def test_counts_and_summary(self):
        """Test counting by severity."""
        report = ValidationReport()
        report.add_error("InvalidRange", "End before start", -60)
        report.add_error("MissingRate", "No rate", None, {"group_id": "P1"})
        report.add_warning("MissingUser", "No user")

        assert not report.is_valid()
        assert report.error_count == 2
        assert report.summary() == "2 error(s), 1 warning(s)"
        assert len(report.get_errors()) == 2
        assert len(report.get_warnings()) == 1

    def test_get_by_code(self):
        """Test filtering by issue code."""
        report = ValidationReport()
        report.add_error("MissingRate", "No rate for P1")
        report.add_error("MissingRate", "No rate for P2")
        report.add_error("NegativeRate", "Negative")

        assert len(report.get_by_code("MissingRate")) == 2

    def test_merge(self):
        """Test merging two reports."""
        first = ValidationReport()
        first.add_error("InvalidRange", "bad")
        second = ValidationReport()
        second.add_warning("MissingUser", "no user")

        first.merge(second)

        assert first.error_count == 1
        assert first.warning_count == 1

    def test_format_groups_by_severity(self):
        """Test the display form of a report."""
        report = ValidationReport()
        report.add_info("RunningEntry", "Running")
        report.add_error("InvalidRange", "End before start")

        text = report.format()

        assert text.startswith("Validation Report - 1 error(s), 1 info message(s)")
        assert text.index("ERRORS:") < text.index("INFO:")

    def test_to_dict(self):
        """Test JSON-safe serialization."""
        report = ValidationReport()
        report.add_error("InvalidRange", "bad", -5)

        data = report.to_dict()

        assert data["valid"] is False
        assert data["issues"][0]["value"] == "-5"
