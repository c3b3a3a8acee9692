"""Pure task domain logic - no I/O dependencies."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are read as local time."""
    return as_aware(datetime.fromisoformat(value))


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Task:
    """A to-do item with an optional due time."""

    id: str
    text: str
    completed: bool = False
    due_time: datetime | None = None
    created_at: datetime | None = None
    details: str | None = None

    def is_due_eligible(self) -> bool:
        """Incomplete and has a due time - the only tasks that get reminders."""
        return not self.completed and self.due_time is not None

    def seconds_until_due(self, as_of: datetime | None = None) -> float | None:
        """Seconds until due (negative if overdue)."""
        if self.due_time is None:
            return None
        as_of = as_of or utcnow()
        return (self.due_time - as_of).total_seconds()

    def to_record(self) -> dict:
        """Serialize to the persisted record layout."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "dueTime": format_timestamp(self.due_time) if self.due_time else None,
            "createdAt": format_timestamp(self.created_at) if self.created_at else None,
            "details": self.details,
        }

    @classmethod
    def from_record(cls, data: dict) -> "Task":
        """Create Task from a persisted record."""
        due = parse_timestamp(data["dueTime"]) if data.get("dueTime") else None
        created = parse_timestamp(data["createdAt"]) if data.get("createdAt") else utcnow()
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            completed=bool(data.get("completed", False)),
            due_time=due,
            created_at=created,
            details=data.get("details"),
        )


@dataclass(frozen=True)
class DueTask:
    """Read-only view of a due-eligible task, as seen by the scheduler."""

    id: str
    text: str
    due_time: datetime

    @classmethod
    def from_task(cls, task: Task) -> "DueTask":
        return cls(id=task.id, text=task.text, due_time=task.due_time)


def due_eligible(tasks: list[Task]) -> list[DueTask]:
    """
    Project tasks onto the ones that can receive reminders.

    Pure function - no I/O. List order is preserved.
    """
    return [DueTask.from_task(t) for t in tasks if t.is_due_eligible()]


def pending_count(tasks: list[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)


# ============== Deadline Progress ==============


@dataclass
class TimeInfo:
    """Time-remaining summary for display."""

    text: str
    urgent: bool
    overdue: bool
    progress: float


def deadline_progress(created_at: datetime, due_time: datetime, as_of: datetime | None = None) -> float:
    """Percentage (0-100) of the created->due span that has elapsed."""
    as_of = as_of or utcnow()
    total = (due_time - created_at).total_seconds()
    if total <= 0:
        return 100.0
    elapsed = (as_of - created_at).total_seconds()
    return min(100.0, max(0.0, elapsed / total * 100))


def time_remaining(task: Task, as_of: datetime | None = None) -> TimeInfo | None:
    """
    Human-readable countdown to the task's due time.

    Returns None for tasks without a due time.
    """
    if task.due_time is None:
        return None
    as_of = as_of or utcnow()
    diff = (task.due_time - as_of).total_seconds()
    progress = deadline_progress(task.created_at or as_of, task.due_time, as_of)

    if diff < 0:
        mins = abs(math.floor(diff / 60))
        if mins < 60:
            return TimeInfo(f"{mins}m overdue", urgent=True, overdue=True, progress=100.0)
        hours = mins // 60
        if hours < 24:
            return TimeInfo(f"{hours}h overdue", urgent=True, overdue=True, progress=100.0)
        return TimeInfo(f"{hours // 24}d overdue", urgent=True, overdue=True, progress=100.0)

    seconds = int(diff)
    if seconds < 60:
        return TimeInfo(f"{seconds}s", urgent=True, overdue=False, progress=progress)

    mins = seconds // 60
    if mins < 60:
        return TimeInfo(f"{mins}m left", urgent=mins < 30, overdue=False, progress=progress)
    hours = mins // 60
    if hours < 24:
        return TimeInfo(f"{hours}h {mins % 60}m", urgent=hours < 2, overdue=False, progress=progress)
    days = hours // 24
    return TimeInfo(f"{days}d {hours % 24}h", urgent=False, overdue=False, progress=progress)
