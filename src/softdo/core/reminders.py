"""Pure reminder-stage policy - no I/O dependencies."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_TITLE = "SoftDo Reminder"

# Width of every stage window. A poll interval wider than this can skip a stage.
STAGE_WINDOW_SECONDS = 60


class ReminderStage(str, Enum):
    """Escalating reminder checkpoints, farthest first."""

    DAY = "24h"
    HOUR = "1h"
    HALF_HOUR = "30m"
    FIVE_MINUTES = "5m"
    DUE = "due"

    @property
    def urgency(self) -> int:
        """0 for the 24h stage up to 4 for the due stage."""
        return list(ReminderStage).index(self)


# (stage, lower, upper): fires when lower < seconds_until_due <= upper.
# Evaluated top to bottom, first match wins.
STAGE_WINDOWS: list[tuple[ReminderStage, float, float]] = [
    (ReminderStage.DUE, -60, 0),
    (ReminderStage.FIVE_MINUTES, 240, 300),
    (ReminderStage.HALF_HOUR, 1740, 1800),
    (ReminderStage.HOUR, 3540, 3600),
    (ReminderStage.DAY, 86340, 86400),
]

STAGE_MESSAGES = {
    ReminderStage.DUE: "is due now!",
    ReminderStage.FIVE_MINUTES: "is due in 5 minutes.",
    ReminderStage.HALF_HOUR: "is due in 30 minutes.",
    ReminderStage.HOUR: "is due in 1 hour.",
    ReminderStage.DAY: "is due in 24 hours.",
}


@dataclass(frozen=True)
class Reminder:
    """A notification ready for a sink."""

    title: str
    body: str


def detect_stage(seconds_until_due: float) -> ReminderStage | None:
    """
    Stage whose window contains seconds_until_due, or None.

    Anything more than 60s past due falls outside every window, so an
    overdue task stays silent.
    """
    for stage, lower, upper in STAGE_WINDOWS:
        if lower < seconds_until_due <= upper:
            return stage
    return None


def stage_message(stage: ReminderStage) -> str:
    return STAGE_MESSAGES[stage]


def format_reminder(text: str, stage: ReminderStage, title: str = DEFAULT_TITLE) -> Reminder:
    """Build the notification for a task reaching a stage."""
    return Reminder(title=title, body=f'Task "{text}" {stage_message(stage)}')
