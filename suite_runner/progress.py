"""Observers notified of per-file state transitions."""

from abc import ABC, abstractmethod
from collections.abc import Collection, Sequence
from dataclasses import dataclass

from suite_runner.displays.base import ProgressDisplay

_SECONDS_PER_MINUTE = 60.0


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a short label."""
    if seconds >= _SECONDS_PER_MINUTE:
        return f"{seconds / _SECONDS_PER_MINUTE:.1f}m"
    return f"{seconds:.1f}s"


class ProgressSink(ABC):
    """Receives state transitions for every file.

    Events for a single file arrive in order (started, then any retrying,
    then exactly one terminal event), but events from different files may
    interleave. Implementations serialize their own rendering.
    """

    def prepare(self, file_ids: Sequence[str]) -> None:  # noqa: B027
        """Announce the files that are about to be scheduled."""

    @abstractmethod
    def started(self, file_id: str) -> None:
        """A file was admitted and its first attempt is running."""

    @abstractmethod
    def retrying(self, file_id: str, attempt: int, scope: Collection[int]) -> None:
        """A file failed and is being re-run for the given case lines.

        ``attempt`` is the number of the attempt about to start, counting the
        first run as 1, so the first retry is attempt 2.
        """

    @abstractmethod
    def succeeded(self, file_id: str, duration: float) -> None:
        """A file passed."""

    @abstractmethod
    def failed(self, file_id: str, duration: float) -> None:
        """A file exhausted its retries."""

    @abstractmethod
    def errored(self, file_id: str, error: BaseException) -> None:
        """A file halted because its attempt could not produce a report."""


class NullProgressSink(ProgressSink):
    """Sink that ignores every transition."""

    def started(self, file_id: str) -> None:
        pass

    def retrying(self, file_id: str, attempt: int, scope: Collection[int]) -> None:
        pass

    def succeeded(self, file_id: str, duration: float) -> None:
        pass

    def failed(self, file_id: str, duration: float) -> None:
        pass

    def errored(self, file_id: str, error: BaseException) -> None:
        pass


@dataclass(frozen=True, kw_only=True)
class DisplayProgressSink(ProgressSink):
    """Sink that forwards transitions to a progress display."""

    display: ProgressDisplay
    retry_ceiling: int

    def prepare(self, file_ids: Sequence[str]) -> None:
        padding = max((len(file_id) for file_id in file_ids), default=0)
        for file_id in file_ids:
            self.display.register(file_id, file_id, padding)

    def started(self, file_id: str) -> None:
        self.display.set_text(file_id, "running")

    def retrying(self, file_id: str, attempt: int, scope: Collection[int]) -> None:
        cases = f"{len(scope)} case(s)" if scope else "all cases"
        self.display.set_text(
            file_id, f"retry {attempt - 1}/{self.retry_ceiling} ({cases})"
        )

    def succeeded(self, file_id: str, duration: float) -> None:
        self.display.mark_success(file_id, format_duration(duration))

    def failed(self, file_id: str, duration: float) -> None:
        self.display.mark_error(file_id, format_duration(duration))

    def errored(self, file_id: str, error: BaseException) -> None:
        self.display.mark_error(file_id, "error")
