"""Shared workflow layer between CLI commands and the reminder daemon.

Builds the store, notifier and scheduler from config and wires them
together.
"""

import logging
from datetime import datetime, timezone

import requests
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from . import __version__
from .adapters.desktop_notifier import DesktopNotifier, NullNotifier
from .adapters.github_releases import GitHubReleaseFeed
from .adapters.json_file import JsonTaskFile
from .config import Config
from .core.reminders import STAGE_WINDOW_SECONDS
from .core.updates import UpdateInfo, evaluate_release
from .ports.notifier import NotificationSink
from .ports.release_feed import ReleaseFeed
from .ports.task_repo import RepositoryUnreadable
from .scheduler import FiredReminder, ReminderScheduler
from .store import TaskStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> TaskStore:
    """Open the task store at the configured path."""
    return TaskStore.open(JsonTaskFile(config.tasks_path))


def get_notifier(config: Config) -> DesktopNotifier | NullNotifier:
    if not config.notifications_enabled:
        return NullNotifier()
    return DesktopNotifier(app_name=config.app_name, timeout=config.notification_timeout)


def build_reminders(store: TaskStore, config: Config, sink: NotificationSink | None = None) -> ReminderScheduler:
    """Create a reminder scheduler reading from store and register it for invalidations."""
    reminders = ReminderScheduler(
        store.due_tasks,
        sink if sink is not None else get_notifier(config),
        title=config.notification_title,
    )
    store.add_observer(reminders)
    return reminders


def run_tick(store: TaskStore, reminders: ReminderScheduler) -> list[FiredReminder]:
    """One scheduled pass: pick up edits from other processes, then evaluate."""
    try:
        store.refresh()
    except RepositoryUnreadable as e:
        logger.warning(f"{e}; keeping last known list")
    except Exception:
        logger.exception("Failed to reload tasks, using last known list")
    return reminders.tick()


def setup_scheduler(
    store: TaskStore,
    reminders: ReminderScheduler,
    config: Config,
    blocking: bool = True,
) -> BaseScheduler:
    """Set up the repeating reminder tick."""
    interval = config.poll_interval_seconds
    if interval > STAGE_WINDOW_SECONDS:
        logger.warning(
            f"Poll interval {interval}s is wider than the {STAGE_WINDOW_SECONDS}s stage window; "
            "reminder stages may be skipped"
        )

    scheduler = BlockingScheduler() if blocking else BackgroundScheduler()
    scheduler.add_job(
        run_tick,
        IntervalTrigger(seconds=interval),
        args=[store, reminders],
        id="reminder_tick",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(timezone.utc),
    )
    logger.info(f"Scheduled reminder check every {interval:g}s")
    return scheduler


def run_reminders(config: Config) -> None:
    """Run the reminder daemon until interrupted."""
    store = get_store(config)
    sink = get_notifier(config)
    reminders = build_reminders(store, config, sink)
    scheduler = setup_scheduler(store, reminders, config)

    logger.info(f"Watching {config.tasks_path} ({len(store.due_tasks())} tasks with due times)")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Reminder daemon stopping")
    finally:
        if scheduler.running:
            scheduler.shutdown(wait=False)
        sink.shutdown(wait=False)


def check_for_updates(config: Config, feed: ReleaseFeed | None = None) -> UpdateInfo:
    """Compare the running version with the latest release. Never raises on network errors."""
    feed = feed or GitHubReleaseFeed(config.github_repo)
    try:
        release = feed.latest_release()
    except requests.RequestException as e:
        logger.warning(f"Update check failed: {e}")
        return UpdateInfo(has_update=False, error=str(e))
    return evaluate_release(__version__, release, config.skip_version or None)
