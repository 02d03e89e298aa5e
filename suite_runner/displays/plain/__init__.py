"""Log display module."""

from suite_runner.displays.plain.display import LogDisplay
from suite_runner.displays.plain.manifest import log_manifest

__all__ = ["LogDisplay", "log_manifest"]
