"""Release feed interface."""

from typing import Protocol


class ReleaseFeed(Protocol):
    """Interface for looking up the latest published release."""

    def latest_release(self) -> dict | None:
        """Raw release data ({"tag_name", "html_url", "body"}), or None."""
        ...
