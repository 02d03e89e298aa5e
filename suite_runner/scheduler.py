"""Bounded-concurrency scheduling of test files."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from suite_runner.errors import ExecutionError
from suite_runner.executor import Executor
from suite_runner.models.results import SuiteResults
from suite_runner.progress import NullProgressSink, ProgressSink
from suite_runner.run_state import DEFAULT_RETRY_CEILING, RunState

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Scheduler:
    """Drives every test file to a terminal state with at most ``workers``
    files running at once.

    A file holds its slot for all of its attempts, retries included.
    """

    executor: Executor
    workers: int
    sink: ProgressSink = field(default_factory=NullProgressSink)
    retry_ceiling: int = DEFAULT_RETRY_CEILING

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.retry_ceiling < 0:
            raise ValueError(
                f"retry_ceiling must not be negative, got {self.retry_ceiling}"
            )

    async def run_all(
        self,
        file_ids: Sequence[str],
        results: SuiteResults,
    ) -> Sequence[RunState]:
        """Run all files and wait until each has succeeded, failed or errored.

        Args:
            file_ids: Test files in discovery order
            results: Accumulator the files record their outcomes into

        Returns:
            One terminal RunState per file, in discovery order

        """
        states = [
            RunState(file_id=file_id, retry_ceiling=self.retry_ceiling)
            for file_id in dict.fromkeys(file_ids)
        ]
        if not states:
            log.info("No test files to run")
            return states

        log.info(
            "Running %d file(s) with %d worker(s)", len(states), self.workers
        )
        self.sink.prepare([state.file_id for state in states])

        gate = asyncio.Semaphore(self.workers)
        outcomes = await asyncio.gather(
            *(self._run_admitted(gate, state, results) for state in states),
            return_exceptions=True,
        )
        log.info("All files finished")

        self._process_outcomes(states, outcomes)
        return states

    async def _run_admitted(
        self,
        gate: asyncio.Semaphore,
        state: RunState,
        results: SuiteResults,
    ) -> None:
        """Wait for a free slot, then run every attempt of one file."""
        async with gate:
            await state.drive(self.executor, self.sink, results)
        log.debug(
            "%s finished: %s after %d attempt(s)",
            state.file_id,
            state.phase,
            state.attempts,
        )

    def _process_outcomes(
        self,
        states: Sequence[RunState],
        outcomes: Sequence[None | BaseException],
    ) -> None:
        """Log execution errors and re-raise anything unexpected."""
        unexpected: BaseException | None = None
        for state, outcome in zip(states, outcomes, strict=True):
            if isinstance(outcome, ExecutionError):
                log.error(
                    "File %s errored: %s", state.file_id, outcome, exc_info=outcome
                )
            elif isinstance(outcome, BaseException) and unexpected is None:
                unexpected = outcome

        if unexpected is not None:
            raise unexpected
