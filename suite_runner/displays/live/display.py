"""Live terminal display with one spinner per file."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn

from suite_runner.displays.base import ProgressDisplay

SUCCESS_MARK = "[green]✓[/green]"
ERROR_MARK = "[red]✗[/red]"


def create_progress(console: Console) -> Progress:
    """Create the Progress instance used for the live display."""
    return Progress(
        SpinnerColumn(finished_text=""),
        TextColumn("{task.fields[mark]}"),
        TextColumn("{task.description}"),
        TextColumn("{task.fields[status]}"),
        console=console,
        transient=False,
    )


@contextmanager
def route_logging(
    console: Console,
    logger: logging.Logger | None = None,
) -> Generator[RichHandler, None, None]:
    """Send log records through ``console`` while a live display is drawn.

    Plain stream handlers on ``logger`` (the root logger by default) write to
    the stream they were created with and would draw over the live region, so
    they are detached until the block exits. Other handlers are left alone.
    """
    logger = logger or logging.getLogger()
    displaced = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    handler = RichHandler(console=console, show_path=False)
    if displaced:
        handler.setLevel(min(h.level for h in displaced))

    for h in displaced:
        logger.removeHandler(h)
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        for h in displaced:
            logger.addHandler(h)


@dataclass(frozen=True, kw_only=True)
class LiveDisplay(ProgressDisplay):
    """Progress display backed by ``rich.progress``."""

    progress: Progress
    tasks: dict[str, TaskID] = field(default_factory=dict, repr=False)

    @classmethod
    @contextmanager
    def open(cls, console: Console | None = None) -> Generator["LiveDisplay", None, None]:
        """Start the live display and stop it on exit."""
        console = console or Console(stderr=True)
        with create_progress(console) as progress, route_logging(progress.console):
            yield cls(progress=progress)

    def register(self, key: str, label: str, padding: int) -> None:
        self.tasks[key] = self.progress.add_task(
            escape(label.ljust(padding)), total=1, mark=" ", status="[dim]queued[/dim]"
        )

    def set_text(self, key: str, text: str) -> None:
        self.progress.update(self.tasks[key], status=escape(text))

    def mark_success(self, key: str, duration_label: str) -> None:
        self.progress.update(
            self.tasks[key],
            completed=1,
            mark=SUCCESS_MARK,
            status=f"[dim]{escape(duration_label)}[/dim]",
        )

    def mark_error(self, key: str, duration_label: str) -> None:
        self.progress.update(
            self.tasks[key],
            completed=1,
            mark=ERROR_MARK,
            status=f"[red]{escape(duration_label)}[/red]",
        )
