"""Display manifest definition for the plugin system."""

from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from suite_runner.displays.base import NullDisplay, ProgressDisplay


@dataclass(frozen=True, kw_only=True)
class DisplayManifest:
    """Manifest describing a display plugin.

    The factory opens the display for the duration of a suite run and closes
    it afterwards, so live renderers can restore the terminal.
    """

    description: str
    display_factory: Callable[[], AbstractContextManager[ProgressDisplay]]


@contextmanager
def open_null_display() -> Generator[ProgressDisplay, None, None]:
    """Provide a display that renders nothing."""
    yield NullDisplay()


null_manifest = DisplayManifest(
    description="No progress output",
    display_factory=open_null_display,
)
