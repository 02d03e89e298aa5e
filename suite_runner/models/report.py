"""Models for the structured report emitted by one test framework run."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field, ValidationError

from suite_runner.errors import MalformedReportError
from suite_runner.models.base import Model

CaseStatus = Literal["passed", "failed", "pending"]


class CaseException(Model):
    """Exception attached to a failed case."""

    exception_class: str = Field(..., alias="class", description="Exception kind")
    message: str = Field(default="", description="Exception message")


class CaseOutcome(Model):
    """Result of a single case within a run."""

    status: CaseStatus = Field(..., description="Case status")
    line_number: int = Field(..., gt=0, description="Source line of the case")
    full_description: str = Field(default="", description="Full case description")
    exception: CaseException | None = Field(
        default=None, description="Failure detail, present for failed cases"
    )


class ResultReport(Model):
    """Report produced by one invocation of the framework against a file."""

    duration: float = Field(..., ge=0, description="Total run time in seconds")
    examples: Sequence[CaseOutcome] = Field(
        default_factory=tuple, description="Case outcomes in execution order"
    )

    def failed_cases(self) -> Sequence[CaseOutcome]:
        """Return the cases whose status is failed, in report order."""
        return [case for case in self.examples if case.status == "failed"]

    def failed_line_numbers(self) -> frozenset[int]:
        """Return the deduplicated line numbers of failed cases."""
        return frozenset(case.line_number for case in self.failed_cases())


def parse_report(payload: str) -> ResultReport:
    """Parse a JSON payload into a ResultReport.

    Raises:
        MalformedReportError: If the payload is not valid JSON or does not
            match the report structure.

    """
    try:
        return ResultReport.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedReportError(f"Invalid report payload: {e}") from e
