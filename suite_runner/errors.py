"""Errors raised while executing test files."""


class ExecutionError(Exception):
    """Raised when an attempt cannot produce a usable report."""


class MalformedReportError(ExecutionError):
    """Raised when a run's output cannot be parsed as a report."""


class SpawnError(ExecutionError):
    """Raised when the framework process cannot be started."""
