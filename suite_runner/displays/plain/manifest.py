"""Log display manifest."""

from suite_runner.displays.manifest import DisplayManifest
from suite_runner.displays.plain.display import LogDisplay

log_manifest = DisplayManifest(
    description="One log line per update, for CI output",
    display_factory=LogDisplay.open,
)
