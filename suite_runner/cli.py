"""CLI entry point for the suite runner."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from suite_runner.config import RunnerConfig
from suite_runner.discovery import discover
from suite_runner.displays.loading import available_displays, load_display_manifest
from suite_runner.executor import SubprocessExecutor
from suite_runner.models.results import SuiteResults
from suite_runner.progress import DisplayProgressSink
from suite_runner.run_state import RunState
from suite_runner.scheduler import Scheduler
from suite_runner.verdict import Verdict, decide

console = Console(stderr=True, soft_wrap=True)

STATUS_SYMBOLS = {
    "succeeded": "✅",
    "failed": "❌",
    "errored": "❗",
}


def log_results_summary(log: logging.Logger, states: Sequence[RunState]) -> None:
    """Log a formatted summary of every file's outcome."""
    log.info("=" * 80)
    log.info("Suite Results Summary:")
    log.info("=" * 80)

    for state in states:
        symbol = STATUS_SYMBOLS.get(state.outcome, "?")
        duration = state.report.duration if state.report else 0.0
        log.info(
            "%s %s: %s (%.2fs, %d attempt(s))",
            symbol,
            state.file_id,
            state.outcome,
            duration,
            state.attempts,
        )
        if state.error is not None:
            log.info("  Error: %s", state.error)


def print_failures(verdict: Verdict, out: Console = console) -> None:
    """Print the failure block for files left failing or errored."""
    if not verdict.exit_failure:
        return

    out.print()
    if verdict.failures:
        out.print(f"[bold red]{len(verdict.failures)} file(s) failed:[/bold red]")
        for failure in verdict.failures:
            out.print()
            out.print(f"  [bold]{escape(failure.description)}[/bold]")
            out.print(f"  [dim]{escape(failure.location)}[/dim]")
            if failure.exception_class or failure.exception_message:
                out.print(
                    f"  [red]{escape(failure.exception_class)}:[/red] "
                    f"{escape(failure.exception_message)}"
                )

    if verdict.errors:
        out.print()
        out.print(f"[bold red]{len(verdict.errors)} file(s) errored:[/bold red]")
        for error in verdict.errors:
            out.print(f"  {escape(error.file_id)}: {escape(error.message)}")


def format_output(states: Sequence[RunState]) -> dict[str, Any]:
    """Format file outcomes for JSON output."""
    all_results: list[dict[str, Any]] = [
        {
            "file": state.file_id,
            "status": state.outcome,
            "attempts": state.attempts,
            "duration": state.report.duration if state.report else None,
            "message": str(state.error) if state.error else None,
        }
        for state in states
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "succeeded"),
        "failed": sum(1 for r in all_results if r["status"] == "failed"),
        "errors": sum(1 for r in all_results if r["status"] == "errored"),
        "results": all_results,
    }


def build_config(
    runner_config_json: str,
    *,
    jobs: int | None = None,
    retries: int | None = None,
    pattern: str | None = None,
) -> RunnerConfig:
    """Build the runner configuration from JSON with flag overrides applied."""
    config_dict: dict[str, Any] = json.loads(runner_config_json or "{}")
    if jobs is not None:
        config_dict["workers"] = jobs
    if retries is not None:
        config_dict["retry_ceiling"] = retries
    if pattern is not None:
        config_dict["pattern"] = pattern
    return RunnerConfig(**config_dict)


async def run(
    paths: Sequence[Path],
    config: RunnerConfig,
    display_key: str = "log",
) -> int:
    """Run the suite and return the exit code."""
    log = logging.getLogger("suite_runner")

    manifest = load_display_manifest(display_key)

    log.info("Discovering test files (pattern=%s)", config.pattern)
    file_ids = discover(paths, config.pattern)

    if not file_ids:
        log.info("No test files found")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    results = SuiteResults()
    executor = SubprocessExecutor(config=config)

    with manifest.display_factory() as display:
        scheduler = Scheduler(
            executor=executor,
            workers=config.resolved_workers(),
            sink=DisplayProgressSink(
                display=display, retry_ceiling=config.retry_ceiling
            ),
            retry_ceiling=config.retry_ceiling,
        )
        states = await scheduler.run_all(file_ids, results)

    log_results_summary(log, states)

    verdict = decide(results)
    print_failures(verdict)

    print(json.dumps(format_output(states), indent=2))

    return verdict.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run test files in parallel, retrying only failed cases"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        default=[Path("spec")],
        help="Test files or directories to search (default: spec)",
    )
    parser.add_argument(
        "--runner-config",
        default="{}",
        help="JSON configuration for the runner",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Number of files to run at once (default: CPU count minus a reserve)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Maximum retries per file (default: 5)",
    )
    parser.add_argument(
        "--pattern",
        default=None,
        help="Glob used to find test files in directories",
    )
    displays = available_displays()
    parser.add_argument(
        "--display",
        default=None,
        choices=displays,
        help=f"Progress display ({', '.join(displays)}; default: rich on a terminal)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = build_config(
        args.runner_config,
        jobs=args.jobs,
        retries=args.retries,
        pattern=args.pattern,
    )
    display_key = args.display or ("rich" if sys.stderr.isatty() else "log")

    exit_code = asyncio.run(
        run(paths=args.paths, config=config, display_key=display_key)
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
