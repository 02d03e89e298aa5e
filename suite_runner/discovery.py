"""Discovery of test files on disk."""

import logging
from collections.abc import Sequence
from pathlib import Path

log = logging.getLogger(__name__)


def discover(paths: Sequence[Path], pattern: str) -> Sequence[str]:
    """Expand paths into a sorted, deduplicated list of test files.

    Files are taken as given; directories are searched with ``pattern``.

    Raises:
        FileNotFoundError: If a path does not exist

    """
    found: set[str] = set()

    for path in paths:
        if path.is_file():
            found.add(str(path))
        elif path.is_dir():
            matches = [match for match in path.glob(pattern) if match.is_file()]
            log.debug("Found %d file(s) under %s", len(matches), path)
            found.update(str(match) for match in matches)
        else:
            raise FileNotFoundError(f"No such file or directory: {path}")

    return sorted(found)
