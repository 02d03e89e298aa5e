"""Live terminal display module."""

from suite_runner.displays.live.display import LiveDisplay
from suite_runner.displays.live.manifest import live_manifest

__all__ = ["LiveDisplay", "live_manifest"]
