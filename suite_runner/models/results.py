"""Shared accumulator for per-file outcomes of a suite run."""

import asyncio
from dataclasses import dataclass, field

from suite_runner.models.report import ResultReport


@dataclass(kw_only=True)
class SuiteResults:
    """Results written by concurrently finishing files.

    All writes go through the ``record_*`` coroutines, which hold an internal
    lock. Once the scheduler has returned, the attributes can be read directly.
    """

    reports: dict[str, ResultReport] = field(default_factory=dict)
    failed_files: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_success(self, file_id: str, report: ResultReport) -> None:
        """Record the final report of a file that passed."""
        async with self._lock:
            self.reports[file_id] = report

    async def record_failure(self, file_id: str, report: ResultReport) -> None:
        """Record the final report of a file that exhausted its retries."""
        async with self._lock:
            self.reports[file_id] = report
            if file_id not in self.failed_files:
                self.failed_files.append(file_id)

    async def record_error(
        self, file_id: str, error: BaseException, report: ResultReport | None
    ) -> None:
        """Record a file whose run halted on an execution error.

        The last successfully parsed report, if any, is kept for reporting.
        """
        async with self._lock:
            self.errors[file_id] = str(error) or type(error).__name__
            if report is not None:
                self.reports[file_id] = report

    @property
    def passed_files(self) -> list[str]:
        """Files with a recorded report that neither failed nor errored."""
        return [
            file_id
            for file_id in self.reports
            if file_id not in self.failed_files and file_id not in self.errors
        ]
