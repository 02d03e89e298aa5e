"""Line-oriented display that writes progress to the log."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field

from suite_runner.displays.base import ProgressDisplay

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class LogDisplay(ProgressDisplay):
    """Progress display that emits one log record per update.

    Suited to CI logs, where animated output is unreadable.
    """

    logger: logging.Logger = field(default=log, repr=False)
    labels: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    @contextmanager
    def open(cls) -> Generator["LogDisplay", None, None]:
        """Provide a log display; there is nothing to tear down."""
        yield cls()

    def register(self, key: str, label: str, padding: int) -> None:
        self.labels[key] = label.ljust(padding)

    def set_text(self, key: str, text: str) -> None:
        self.logger.info("%s  %s", self.labels.get(key, key), text)

    def mark_success(self, key: str, duration_label: str) -> None:
        self.logger.info("%s  ✓ passed (%s)", self.labels.get(key, key), duration_label)

    def mark_error(self, key: str, duration_label: str) -> None:
        self.logger.error("%s  ✗ failed (%s)", self.labels.get(key, key), duration_label)
