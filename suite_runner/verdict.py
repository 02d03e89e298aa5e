"""Suite-wide pass/fail decision."""

from collections.abc import Sequence
from dataclasses import dataclass

from suite_runner.models.report import ResultReport
from suite_runner.models.results import SuiteResults


@dataclass(frozen=True, kw_only=True)
class FailureSummary:
    """First failing case of a file that exhausted its retries.

    Fields are empty when the recorded report holds no failed case.
    """

    file_id: str
    description: str = ""
    line_number: int | None = None
    exception_class: str = ""
    exception_message: str = ""

    @property
    def location(self) -> str:
        """File and line of the failing case, e.g. ``spec/a_spec.rb:12``."""
        if self.line_number is None:
            return self.file_id
        return f"{self.file_id}:{self.line_number}"


@dataclass(frozen=True, kw_only=True)
class ErrorSummary:
    """File whose run halted on an execution error."""

    file_id: str
    message: str


@dataclass(frozen=True, kw_only=True)
class Verdict:
    """Outcome of a suite run."""

    exit_failure: bool
    failures: Sequence[FailureSummary]
    errors: Sequence[ErrorSummary] = ()

    @property
    def exit_code(self) -> int:
        """Process exit status for this verdict."""
        return 1 if self.exit_failure else 0


def summarize_failure(file_id: str, report: ResultReport | None) -> FailureSummary:
    """Build the summary for a failed file from its final report."""
    if report is None:
        return FailureSummary(file_id=file_id)

    failed = report.failed_cases()
    if not failed:
        return FailureSummary(file_id=file_id)

    case = failed[0]
    return FailureSummary(
        file_id=file_id,
        description=case.full_description,
        line_number=case.line_number,
        exception_class=case.exception.exception_class if case.exception else "",
        exception_message=case.exception.message if case.exception else "",
    )


def decide(results: SuiteResults) -> Verdict:
    """Decide the suite outcome once every file has finished.

    The suite fails iff any file failed or errored. One failure summary is
    produced per failed file, in the order the files failed.
    """
    failures = [
        summarize_failure(file_id, results.reports.get(file_id))
        for file_id in results.failed_files
    ]
    errors = [
        ErrorSummary(file_id=file_id, message=message)
        for file_id, message in results.errors.items()
    ]
    return Verdict(
        exit_failure=bool(failures or errors),
        failures=failures,
        errors=errors,
    )
