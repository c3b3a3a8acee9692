"""SoftDo - task list with staged due-time reminders."""

__version__ = "1.7.2"
