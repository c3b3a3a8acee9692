"""Task repository interface."""

from typing import Protocol

from softdo.core.tasks import Task


class RepositoryUnreadable(Exception):
    """Raised when persisted tasks exist but cannot be parsed."""

    pass


class TaskRepository(Protocol):
    """Interface for persisting the ordered task list."""

    def load(self) -> list[Task]:
        """
        Load the whole list, in order.

        Nothing persisted yet is an empty list. Raises RepositoryUnreadable
        if stored data is present but corrupt, so callers can tell it apart
        from a list that was emptied.
        """
        ...

    def save(self, tasks: list[Task]) -> None:
        """Replace the persisted list with tasks, in order."""
        ...
