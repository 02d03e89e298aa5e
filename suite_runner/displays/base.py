"""Abstract base class for progress displays."""

from abc import ABC, abstractmethod


class ProgressDisplay(ABC):
    """Renders one line of progress per registered key.

    Implementations may be called from any task and must serialize their own
    output.
    """

    @abstractmethod
    def register(self, key: str, label: str, padding: int) -> None:
        """Add a line for a key.

        Args:
            key: Identifier used by later update calls
            label: Text shown at the start of the line
            padding: Width the label is padded to so lines align

        """

    @abstractmethod
    def set_text(self, key: str, text: str) -> None:
        """Replace the status text shown for a key."""

    @abstractmethod
    def mark_success(self, key: str, duration_label: str) -> None:
        """Finish a line as passed."""

    @abstractmethod
    def mark_error(self, key: str, duration_label: str) -> None:
        """Finish a line as failed."""


class NullDisplay(ProgressDisplay):
    """Display that renders nothing."""

    def register(self, key: str, label: str, padding: int) -> None:
        pass

    def set_text(self, key: str, text: str) -> None:
        pass

    def mark_success(self, key: str, duration_label: str) -> None:
        pass

    def mark_error(self, key: str, duration_label: str) -> None:
        pass
