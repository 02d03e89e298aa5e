"""Live display manifest."""

from suite_runner.displays.live.display import LiveDisplay
from suite_runner.displays.manifest import DisplayManifest

live_manifest = DisplayManifest(
    description="Animated spinners for interactive terminals",
    display_factory=LiveDisplay.open,
)
