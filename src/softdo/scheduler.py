"""Reminder scheduler - staged due-time notifications.

Each tick walks the due-eligible tasks, works out which reminder stage (if
any) the current time falls into, and notifies once per (task, stage).
The StageTracker remembers the last stage notified for every task; the
task store invalidates entries when a task is completed, deleted, or
rescheduled so a new deadline starts with a clean history.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable

from .core.reminders import DEFAULT_TITLE, Reminder, ReminderStage, detect_stage, format_reminder
from .core.tasks import DueTask, utcnow
from .ports.notifier import NotificationSink

logger = logging.getLogger(__name__)


class StageTracker:
    """Last notified stage per task id."""

    def __init__(self):
        self._stages: dict[str, ReminderStage] = {}

    def get(self, task_id: str) -> ReminderStage | None:
        return self._stages.get(task_id)

    def set(self, task_id: str, stage: ReminderStage) -> None:
        self._stages[task_id] = stage

    def clear(self, task_id: str) -> None:
        self._stages.pop(task_id, None)

    def clear_all(self) -> None:
        self._stages.clear()

    def retain(self, task_ids: Iterable[str]) -> None:
        """Drop entries for every id not in task_ids."""
        keep = set(task_ids)
        for task_id in [k for k in self._stages if k not in keep]:
            del self._stages[task_id]

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._stages

    def __len__(self) -> int:
        return len(self._stages)


@dataclass(frozen=True)
class FiredReminder:
    """A stage that fired during a tick."""

    task_id: str
    stage: ReminderStage
    reminder: Reminder
    delivered: bool


class ReminderScheduler:
    """
    Decides when reminders fire.

    due_tasks is re-read on every tick, so edits between ticks are seen on
    the next one. Also acts as a task store observer (invalidate /
    invalidate_all).
    """

    def __init__(
        self,
        due_tasks: Callable[[], list[DueTask]],
        sink: NotificationSink,
        tracker: StageTracker | None = None,
        title: str = DEFAULT_TITLE,
    ):
        self._due_tasks = due_tasks
        self.sink = sink
        self.tracker = tracker if tracker is not None else StageTracker()
        self.title = title

    # ============== Store Observer ==============

    def invalidate(self, task_id: str) -> None:
        self.tracker.clear(task_id)

    def invalidate_all(self) -> None:
        self.tracker.clear_all()

    # ============== Evaluation ==============

    def evaluate(self, task: DueTask, now: datetime) -> ReminderStage | None:
        """Stage that should fire for task at now, or None."""
        if task.due_time is None:
            return None
        stage = detect_stage((task.due_time - now).total_seconds())
        if stage is None:
            return None
        if self.tracker.get(task.id) == stage:
            logger.debug(f"Stage {stage.value} already notified for task {task.id}")
            return None
        return stage

    def tick(self, now: datetime | None = None) -> list[FiredReminder]:
        """
        Run one evaluation pass over all due-eligible tasks.

        A failure on one task is logged and does not stop the others.
        """
        now = now or utcnow()
        try:
            tasks = self._due_tasks()
        except Exception:
            logger.exception("Failed to read due tasks")
            return []

        fired = []
        for task in tasks:
            try:
                result = self._process(task, now)
            except Exception:
                logger.exception(f"Failed to evaluate reminders for task {task.id}")
                continue
            if result is not None:
                fired.append(result)

        # Tasks that left the due-eligible set take their history with them.
        self.tracker.retain(t.id for t in tasks)
        return fired

    def _process(self, task: DueTask, now: datetime) -> FiredReminder | None:
        stage = self.evaluate(task, now)
        if stage is None:
            return None

        reminder = format_reminder(task.text, stage, title=self.title)
        delivered = True
        try:
            self.sink.notify(reminder.title, reminder.body)
        except Exception as e:
            delivered = False
            logger.error(f"Notification failed for task {task.id} stage={stage.value}: {e}")

        # Attempted counts as notified.
        self.tracker.set(task.id, stage)
        logger.info(f"Reminder fired for task {task.id} stage={stage.value}")
        return FiredReminder(task_id=task.id, stage=stage, reminder=reminder, delivered=delivered)
