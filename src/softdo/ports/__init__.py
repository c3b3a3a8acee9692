"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import RepositoryUnreadable, TaskRepository
from .notifier import NotificationSink
from .release_feed import ReleaseFeed

__all__ = [
    "RepositoryUnreadable",
    "TaskRepository",
    "NotificationSink",
    "ReleaseFeed",
]
