"""Per-file retry state machine."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from suite_runner.errors import ExecutionError
from suite_runner.executor import Executor
from suite_runner.models.report import ResultReport
from suite_runner.models.results import SuiteResults
from suite_runner.progress import ProgressSink

log = logging.getLogger(__name__)

DEFAULT_RETRY_CEILING = 5


class RunPhase(StrEnum):
    """Lifecycle phase of a file's run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        """Whether no further attempts can happen in this phase."""
        return self in TERMINAL_PHASES


TERMINAL_PHASES = frozenset({RunPhase.SUCCEEDED, RunPhase.FAILED, RunPhase.ERRORED})


class InvalidTransitionError(Exception):
    """Raised when a result is recorded in a phase that does not accept one."""


@dataclass(kw_only=True)
class RunState:
    """Retry controller for a single test file.

    ``advance`` is the pure transition function: it takes the outcome of one
    attempt and decides whether the file succeeded, failed for good, or needs
    another attempt restricted to the cases that just failed. ``drive`` runs
    the attempts against an executor.
    """

    file_id: str
    retry_ceiling: int = DEFAULT_RETRY_CEILING
    retry_count: int = 0
    failed_lines: frozenset[int] = field(default_factory=frozenset)
    report: ResultReport | None = None
    phase: RunPhase = RunPhase.NOT_STARTED
    error: ExecutionError | None = None

    @property
    def attempts(self) -> int:
        """Number of attempts started so far."""
        if self.phase is RunPhase.NOT_STARTED:
            return 0
        return self.retry_count + 1

    @property
    def outcome(self) -> str:
        """Terminal outcome, or ``pending`` while attempts remain."""
        return self.phase.value if self.phase.is_terminal else "pending"

    def start(self) -> None:
        """Move from NotStarted to Running."""
        if self.phase is not RunPhase.NOT_STARTED:
            raise InvalidTransitionError(f"{self.file_id}: already {self.phase}")
        self.phase = RunPhase.RUNNING

    def advance(self, report: ResultReport, succeeded: bool) -> RunPhase:
        """Apply the outcome of the current attempt.

        Args:
            report: Report of the attempt that just finished
            succeeded: Whether the framework process exited successfully

        Returns:
            The new phase

        Raises:
            InvalidTransitionError: If no attempt is currently running

        """
        if self.phase is not RunPhase.RUNNING:
            raise InvalidTransitionError(
                f"{self.file_id}: cannot record a result while {self.phase}"
            )

        self.report = report
        if succeeded:
            self.phase = RunPhase.SUCCEEDED
        elif self.retry_count < self.retry_ceiling:
            # Scope comes from this attempt only, never the union of attempts.
            self.failed_lines = report.failed_line_numbers()
            self.retry_count += 1
            self.phase = RunPhase.RETRYING
        else:
            self.phase = RunPhase.FAILED
        return self.phase

    def resume(self) -> None:
        """Move from Retrying back to Running for the next scoped attempt."""
        if self.phase is not RunPhase.RETRYING:
            raise InvalidTransitionError(f"{self.file_id}: not retrying")
        self.phase = RunPhase.RUNNING

    def halt(self, error: ExecutionError) -> None:
        """Stop the run because an attempt produced no usable report."""
        self.error = error
        self.phase = RunPhase.ERRORED

    async def drive(
        self,
        executor: Executor,
        sink: ProgressSink,
        results: SuiteResults,
    ) -> RunPhase:
        """Run attempts until a terminal phase is reached and record it.

        Raises:
            ExecutionError: If an attempt cannot be started or parsed; the
                error is recorded in ``results`` before it propagates

        """
        self.start()
        sink.started(self.file_id)

        while not self.phase.is_terminal:
            if self.phase is RunPhase.RETRYING:
                self.resume()
            try:
                report, succeeded = await executor.run(self.file_id, self.failed_lines)
            except ExecutionError as e:
                self.halt(e)
                await results.record_error(self.file_id, e, self.report)
                sink.errored(self.file_id, e)
                raise

            phase = self.advance(report, succeeded)
            if phase is RunPhase.RETRYING:
                log.info(
                    "Retrying %s (%d/%d) for lines %s",
                    self.file_id,
                    self.retry_count,
                    self.retry_ceiling,
                    sorted(self.failed_lines) or "all",
                )
                sink.retrying(self.file_id, self.attempts, self.failed_lines)
            elif phase is RunPhase.SUCCEEDED:
                await results.record_success(self.file_id, report)
                sink.succeeded(self.file_id, report.duration)
            else:
                await results.record_failure(self.file_id, report)
                sink.failed(self.file_id, report.duration)

        return self.phase
