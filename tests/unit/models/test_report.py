"""Tests for report models."""

import json

import pytest

from suite_runner.errors import ExecutionError, MalformedReportError
from suite_runner.models.report import ResultReport, parse_report
from suite_runner.testing.factories import ResultReportFactory
from suite_runner.testing.payloads import case_payload, report_payload


class TestParseReport:
    """Tests for parse_report."""

    def test_parses_framework_payload(self) -> None:
        """Parses duration and cases, ignoring fields it does not use."""
        payload = report_payload(
            duration=1.25,
            cases=[
                case_payload(line_number=3),
                case_payload(
                    line_number=9,
                    status="failed",
                    full_description="Cart totals sums items",
                    exception_class="RSpec::Expectations::ExpectationNotMetError",
                    message="expected 3, got 4",
                ),
                case_payload(line_number=14, status="pending"),
            ],
        )

        report = parse_report(json.dumps(payload))

        assert report.duration == 1.25
        assert [case.status for case in report.examples] == [
            "passed",
            "failed",
            "pending",
        ]
        failed = report.examples[1]
        assert failed.line_number == 9
        assert failed.full_description == "Cart totals sums items"
        assert failed.exception is not None
        assert (
            failed.exception.exception_class
            == "RSpec::Expectations::ExpectationNotMetError"
        )
        assert failed.exception.message == "expected 3, got 4"
        assert report.examples[0].exception is None

    def test_parses_report_without_cases(self) -> None:
        """A report with no cases is valid."""
        report = parse_report('{"duration": 0.0, "examples": []}')

        assert report.duration == 0.0
        assert list(report.examples) == []

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "Finished in 0.1 seconds",
            "[1, 2, 3]",
            '{"examples": []}',
            '{"duration": -1, "examples": []}',
            '{"duration": 0.1, "examples": [{"status": "exploded", "line_number": 1}]}',
            '{"duration": 0.1, "examples": [{"status": "passed", "line_number": 0}]}',
            '{"duration": 0.1, "examples": [{"status": "failed"}]}',
        ],
    )
    def test_raises_for_malformed_payload(self, payload: str) -> None:
        """Raises MalformedReportError for payloads that are not reports."""
        with pytest.raises(MalformedReportError, match="Invalid report payload"):
            parse_report(payload)

    def test_malformed_report_is_an_execution_error(self) -> None:
        """Malformed output is an execution error, not a case failure."""
        with pytest.raises(ExecutionError):
            parse_report("not json")


class TestFailedLineNumbers:
    """Tests for ResultReport.failed_line_numbers."""

    def test_returns_only_failed_lines(self) -> None:
        """Passed and pending cases are not part of the retry scope."""
        report = parse_report(
            json.dumps(
                report_payload(
                    cases=[
                        case_payload(line_number=4),
                        case_payload(line_number=8, status="failed"),
                        case_payload(line_number=15, status="pending"),
                        case_payload(line_number=16, status="failed"),
                    ]
                )
            )
        )

        assert report.failed_line_numbers() == {8, 16}

    def test_deduplicates_lines(self) -> None:
        """Cases sharing a line (e.g. generated cases) appear once."""
        report = parse_report(
            json.dumps(
                report_payload(
                    cases=[
                        case_payload(line_number=21, status="failed"),
                        case_payload(line_number=21, status="failed"),
                    ]
                )
            )
        )

        assert report.failed_line_numbers() == {21}
        assert len(report.failed_cases()) == 2

    def test_empty_for_passing_report(self) -> None:
        """A report with only passing cases has no failed lines."""
        report = ResultReportFactory.build()

        assert report.failed_line_numbers() == frozenset()
        assert report.failed_cases() == []

    def test_report_is_immutable(self) -> None:
        """Reports cannot be modified after parsing."""
        report = ResultReport(duration=0.5)

        with pytest.raises(ValueError, match="frozen"):
            report.duration = 1.0  # type: ignore[misc]
