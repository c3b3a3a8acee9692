"""Notification sink interface."""

from typing import Protocol


class NotificationSink(Protocol):
    """Interface for showing a system notification."""

    def notify(self, title: str, body: str) -> object:
        """
        Show a notification. Must not block the caller.

        Implementations may return a handle for the pending delivery (the
        desktop notifier returns a Future); callers ignore it.
        """
        ...
