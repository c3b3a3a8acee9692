"""Adapters - I/O implementations of ports."""

from .json_file import JsonTaskFile
from .desktop_notifier import DesktopNotifier, NotificationDeliveryFailure, NullNotifier
from .github_releases import GitHubReleaseFeed

__all__ = [
    "JsonTaskFile",
    "DesktopNotifier",
    "NotificationDeliveryFailure",
    "NullNotifier",
    "GitHubReleaseFeed",
]
