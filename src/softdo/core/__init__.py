"""Functional core - pure business logic with no I/O."""

from .tasks import Task, DueTask, TimeInfo, due_eligible, pending_count, time_remaining
from .reminders import Reminder, ReminderStage, detect_stage, format_reminder
from .updates import UpdateInfo, evaluate_release, normalize_version

__all__ = [
    # Tasks
    "Task",
    "DueTask",
    "TimeInfo",
    "due_eligible",
    "pending_count",
    "time_remaining",
    # Reminders
    "Reminder",
    "ReminderStage",
    "detect_stage",
    "format_reminder",
    # Updates
    "UpdateInfo",
    "evaluate_release",
    "normalize_version",
]
