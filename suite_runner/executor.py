"""Execution of a single test file through the external framework."""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Collection, Sequence
from dataclasses import dataclass

from suite_runner.config import RunnerConfig
from suite_runner.errors import MalformedReportError, SpawnError
from suite_runner.models.report import ResultReport, parse_report

log = logging.getLogger(__name__)


class Executor(ABC):
    """Runs one test file, optionally restricted to a set of case lines."""

    @abstractmethod
    async def run(
        self,
        file_id: str,
        scope: Collection[int] = (),
    ) -> tuple[ResultReport, bool]:
        """Run a test file and return its report and the process success flag.

        Args:
            file_id: Path of the test file
            scope: Line numbers of the cases to run (empty runs every case)

        Returns:
            The parsed report and whether the process exited successfully

        Raises:
            ExecutionError: If the process cannot be started or its output
                cannot be parsed

        """


def format_target(file_id: str, scope: Collection[int] = ()) -> str:
    """Build the framework target for a file, e.g. ``spec/a_spec.rb[3,17]``."""
    if not scope:
        return file_id
    return f"{file_id}[{','.join(str(line) for line in sorted(scope))}]"


def last_line(output: str) -> str:
    """Return the last non-empty line of a process output."""
    for line in reversed(output.splitlines()):
        if line.strip():
            return line
    return ""


@dataclass(frozen=True, kw_only=True)
class SubprocessExecutor(Executor):
    """Executor that spawns the configured framework command."""

    config: RunnerConfig

    def build_command(self, file_id: str, scope: Collection[int] = ()) -> Sequence[str]:
        """Return the argument vector for one attempt."""
        return [*self.config.command, format_target(file_id, scope)]

    def build_env(self) -> dict[str, str]:
        """Return the child environment with the non-interactive marker set."""
        return {**os.environ, self.config.ci_env_var: self.config.ci_env_value}

    async def run(
        self,
        file_id: str,
        scope: Collection[int] = (),
    ) -> tuple[ResultReport, bool]:
        """Spawn the framework for one attempt and parse its final line."""
        command = self.build_command(file_id, scope)
        log.debug("Running: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                env=self.build_env(),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SpawnError(f"Cannot start {command[0]!r}: {e}") from e

        stdout, stderr = await process.communicate()

        if stderr:
            log.debug("%s stderr: %s", file_id, stderr.decode(errors="replace").strip())

        payload = last_line(stdout.decode(errors="replace"))
        if not payload:
            raise MalformedReportError(
                f"No report output from {file_id} (exit code {process.returncode})"
            )

        try:
            report = parse_report(payload)
        except MalformedReportError as e:
            raise MalformedReportError(f"{file_id}: {e}") from e

        return report, process.returncode == 0
