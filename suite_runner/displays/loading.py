"""Loading of progress displays from entry points."""

from importlib.metadata import entry_points

from suite_runner.displays.manifest import DisplayManifest

ENTRY_POINT_GROUP = "suite_runner.displays"


class DisplayNotFoundError(Exception):
    """Raised when a display is not found."""


def load_display_manifest(key: str) -> DisplayManifest:
    """Load a display manifest by key.

    Args:
        key: The display key as registered in pyproject.toml
             (e.g., "rich", "log")

    Returns:
        The display manifest instance

    Raises:
        DisplayNotFoundError: If no display with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: DisplayManifest = entry.load()
            return manifest

    available = sorted(e.name for e in entries)
    raise DisplayNotFoundError(
        f"Display '{key}' not found. Available displays: {available}"
    )


def available_displays() -> list[str]:
    """Return the keys of all registered displays."""
    return sorted(e.name for e in entry_points(group=ENTRY_POINT_GROUP))
