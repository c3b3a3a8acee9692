"""Task store - owns the ordered task list and persists every change.

The store is the only writer of Task records. Anything that keeps per-task
state derived from due times (the reminder scheduler) registers as an
observer and is told when that state goes stale.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Protocol

from .core.tasks import DueTask, Task, as_aware, due_eligible, pending_count, utcnow
from .ports.task_repo import RepositoryUnreadable, TaskRepository

logger = logging.getLogger(__name__)


class TaskStoreError(Exception):
    """Base class for task store errors."""

    pass


class TaskNotFound(TaskStoreError):
    """Raised when an operation references an unknown task id."""

    def __init__(self, task_id: str):
        super().__init__(f"No task with id {task_id!r}")
        self.task_id = task_id


class InvalidIndex(TaskStoreError):
    """Raised when a list position is out of range."""

    pass


class PersistenceError(TaskStoreError):
    """Raised when saving fails. The in-memory change is kept."""

    pass


class StoreObserver(Protocol):
    """Receives invalidations for tasks whose reminder history is stale."""

    def invalidate(self, task_id: str) -> None: ...

    def invalidate_all(self) -> None: ...


class TaskStore:
    """In-memory ordered task list backed by a TaskRepository."""

    def __init__(
        self,
        repository: TaskRepository,
        tasks: Iterable[Task] = (),
        observers: Iterable[StoreObserver] = (),
    ):
        self.repository = repository
        self._tasks: list[Task] = list(tasks)
        self._observers: list[StoreObserver] = list(observers)
        # Every id this process has seen; never handed out again.
        self._issued_ids: set[str] = {t.id for t in self._tasks}
        self._seen_fingerprint = self._repository_fingerprint()

    @classmethod
    def open(cls, repository: TaskRepository, observers: Iterable[StoreObserver] = ()) -> "TaskStore":
        """
        Create a store holding the repository's persisted list.

        An unreadable repository opens as an empty list; the next save
        overwrites it.
        """
        try:
            tasks = repository.load()
        except RepositoryUnreadable as e:
            logger.warning(f"{e}; starting with an empty list")
            tasks = []
        logger.debug(f"Loaded {len(tasks)} tasks")
        return cls(repository, tasks, observers)

    def add_observer(self, observer: StoreObserver) -> None:
        self._observers.append(observer)

    # ============== Queries ==============

    @property
    def tasks(self) -> list[Task]:
        """Copies of all tasks, in list order."""
        return [replace(t) for t in self._tasks]

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task:
        return replace(self._find(task_id))

    def index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFound(task_id)

    def due_tasks(self) -> list[DueTask]:
        """Incomplete tasks with a due time, as read-only views."""
        return due_eligible(self._tasks)

    def pending_count(self) -> int:
        return pending_count(self._tasks)

    # ============== Mutations ==============

    def create(
        self,
        text: str,
        due_time: datetime | None = None,
        details: str | None = None,
        now: datetime | None = None,
    ) -> Task:
        """Append a new incomplete task."""
        task = Task(
            id=self._new_id(),
            text=text,
            completed=False,
            due_time=as_aware(due_time) if due_time else None,
            created_at=now or utcnow(),
            details=details,
        )
        self._tasks.append(task)
        logger.info(f"Created task {task.id} due={due_time}")
        self._save()
        return replace(task)

    def toggle_completed(self, task_id: str) -> Task:
        """Flip the completed flag. Completing a task clears its reminder history."""
        task = self._find(task_id)
        task.completed = not task.completed
        if task.completed:
            self._invalidate(task_id)
        self._save()
        return replace(task)

    def rename(self, task_id: str, text: str) -> Task:
        task = self._find(task_id)
        task.text = text
        self._save()
        return replace(task)

    def set_details(self, task_id: str, details: str | None) -> Task:
        task = self._find(task_id)
        task.details = details
        self._save()
        return replace(task)

    def set_due_time(self, task_id: str, due_time: datetime | None) -> Task:
        """Replace or clear the due time. A different value resets reminder history."""
        task = self._find(task_id)
        if due_time is not None:
            due_time = as_aware(due_time)
        if task.due_time != due_time:
            task.due_time = due_time
            self._invalidate(task_id)
        self._save()
        return replace(task)

    def delete(self, task_id: str) -> None:
        task = self._find(task_id)
        self._tasks.remove(task)
        self._invalidate(task_id)
        self._save()

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the task at from_index so it ends up at to_index."""
        size = len(self._tasks)
        if not (0 <= from_index < size and 0 <= to_index < size):
            raise InvalidIndex(f"Cannot move {from_index} -> {to_index} in a list of {size}")
        task = self._tasks.pop(from_index)
        self._tasks.insert(to_index, task)
        self._save()

    def clear_all(self) -> None:
        self._tasks.clear()
        for observer in self._observers:
            observer.invalidate_all()
        self._save()

    def refresh(self) -> bool:
        """
        Reload the list if the repository changed behind our back.

        Fires the same invalidations a local edit would have for tasks that
        disappeared, were completed, or had their due time changed.
        Returns True if the list was reloaded. If the repository is
        unreadable, RepositoryUnreadable propagates and the current list and
        reminder history are kept.
        """
        fingerprint = self._repository_fingerprint()
        if fingerprint is not None and fingerprint == self._seen_fingerprint:
            return False

        loaded = self.repository.load()
        fresh = {t.id: t for t in loaded}
        for before in self._tasks:
            after = fresh.get(before.id)
            if (
                after is None
                or (after.completed and not before.completed)
                or after.due_time != before.due_time
            ):
                self._invalidate(before.id)

        self._tasks = loaded
        self._issued_ids.update(fresh)
        self._seen_fingerprint = fingerprint
        logger.debug(f"Reloaded {len(loaded)} tasks")
        return True

    # ============== Internals ==============

    def _find(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFound(task_id)

    def _new_id(self) -> str:
        while True:
            task_id = uuid.uuid4().hex
            if task_id not in self._issued_ids:
                self._issued_ids.add(task_id)
                return task_id

    def _invalidate(self, task_id: str) -> None:
        for observer in self._observers:
            observer.invalidate(task_id)

    def _repository_fingerprint(self) -> tuple | None:
        fingerprint = getattr(self.repository, "fingerprint", None)
        return fingerprint() if callable(fingerprint) else None

    def _save(self) -> None:
        try:
            self.repository.save(self._tasks)
        except OSError as e:
            logger.error(f"Failed to save tasks: {e}")
            raise PersistenceError(f"Failed to save tasks: {e}") from e
        self._seen_fingerprint = self._repository_fingerprint()
