"""Configuration for the suite runner."""

import os
from collections.abc import Sequence

from pydantic import BaseModel, Field

DEFAULT_COMMAND = ("rspec", "--format", "json", "--order", "rand")


def default_workers(reserve: int = 2) -> int:
    """Return the worker limit derived from available CPUs, at least 1."""
    return max(1, (os.cpu_count() or 1) - reserve)


class RunnerConfig(BaseModel):
    """Configuration for executing and retrying test files."""

    command: Sequence[str] = Field(default=DEFAULT_COMMAND, min_length=1)
    ci_env_var: str = "CI"
    ci_env_value: str = "true"
    retry_ceiling: int = Field(default=5, ge=0)
    workers: int | None = Field(default=None, ge=1)
    worker_reserve: int = Field(default=2, ge=0)
    pattern: str = "**/*_spec.rb"

    def resolved_workers(self) -> int:
        """Return the configured worker limit, or one derived from CPUs."""
        if self.workers is not None:
            return self.workers
        return default_workers(self.worker_reserve)
