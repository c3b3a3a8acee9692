"""Test doubles shared across test modules."""

from softdo.core.tasks import Task


class FakeRepository:
    """
    In-memory TaskRepository.

    Keeps every saved snapshot so tests can assert on what was persisted.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self.stored = [t.to_record() for t in tasks or []]
        self.saves: list[list[dict]] = []
        self.fail_with: Exception | None = None

    def load(self) -> list[Task]:
        return [Task.from_record(r) for r in self.stored]

    def save(self, tasks: list[Task]) -> None:
        if self.fail_with:
            raise self.fail_with
        self.stored = [t.to_record() for t in tasks]
        self.saves.append(self.stored)


class RecordingSink:
    """NotificationSink that records every call."""

    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        if self.fail:
            raise RuntimeError("notification backend exploded")
