"""SoftDo CLI - task list with due-time reminders."""

import json
import logging
import re
import sys
from datetime import datetime, timedelta

import click

from . import __version__
from .config import load_config
from .core.tasks import Task, parse_timestamp, time_remaining, utcnow
from .store import TaskStore, TaskStoreError
from .workflows import check_for_updates, get_store, run_reminders

RELATIVE_WHEN = re.compile(r"^\+(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")


def parse_when(value: str, now: datetime | None = None) -> datetime:
    """
    Parse a due time.

    Accepts ISO-8601 ("2026-10-20T14:00", "2026-10-20 14:00", naive means
    local time) or an offset from now ("+90m", "+2h", "+1d", "+1h30m").
    """
    value = value.strip()
    match = RELATIVE_WHEN.match(value)
    if match and any(match.groups()):
        days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
        now = now or utcnow()
        return now + timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
    try:
        return parse_timestamp(value)
    except ValueError:
        raise ValueError(f"Unrecognized time {value!r}. Use ISO format or +90m / +2h / +1d.")


def _parse_due(value: str) -> datetime:
    try:
        return parse_when(value)
    except ValueError as e:
        _fail(str(e))


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_store() -> TaskStore:
    return get_store(load_config())


def _resolve_id(store: TaskStore, prefix: str) -> str:
    """Expand a unique id prefix to the full task id."""
    ids = [t.id for t in store.tasks]
    if prefix in ids:
        return prefix
    matches = [i for i in ids if i.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        _fail(f"Task id {prefix!r} is ambiguous ({len(matches)} matches)")
    _fail(f"No task with id {prefix!r}")


def _format_task(position: int, task: Task) -> str:
    check = "x" if task.completed else " "
    due = ""
    if task.due_time:
        local = task.due_time.astimezone().strftime("%Y-%m-%d %H:%M")
        info = time_remaining(task)
        due = f" (due {local}" + (f", {info.text}" if not task.completed else "") + ")"
    return f"{position:>2}. [{check}] {task.text}{due}  {task.id[:8]}"


@click.group()
@click.version_option(version=__version__, prog_name="softdo")
def main():
    """SoftDo - task list with due-time reminders."""
    pass


@main.command()
@click.argument("text")
@click.option("--due", "when", default=None, help="Due time (ISO or +90m / +2h / +1d)")
@click.option("--details", default=None, help="Free-text note")
def add(text: str, when: str | None, details: str | None):
    """Add a task."""
    text = text.strip()
    if not text:
        _fail("Task text is empty")
    due = _parse_due(when) if when else None

    store = _open_store()
    try:
        task = store.create(text, due_time=due, details=details)
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"Added {task.id[:8]}: {task.text}")


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--pending", is_flag=True, help="Hide completed tasks")
def list_tasks(as_json: bool, pending: bool):
    """List tasks in order."""
    store = _open_store()
    tasks = [(i, t) for i, t in enumerate(store.tasks, start=1) if not (pending and t.completed)]

    if as_json:
        click.echo(json.dumps([{"position": i, **t.to_record()} for i, t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks.")
        return

    for position, task in tasks:
        click.echo(_format_task(position, task))
    click.echo(f"\n{store.pending_count()} remaining")


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Toggle a task's completed flag."""
    store = _open_store()
    try:
        task = store.toggle_completed(_resolve_id(store, task_id))
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"{'Completed' if task.completed else 'Reopened'}: {task.text}")


@main.command()
@click.argument("task_id")
@click.argument("text")
def rename(task_id: str, text: str):
    """Change a task's text."""
    text = text.strip()
    if not text:
        _fail("Task text is empty")
    store = _open_store()
    try:
        store.rename(_resolve_id(store, task_id), text)
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"Renamed to: {text}")


@main.command()
@click.argument("task_id")
@click.argument("text", required=False)
def details(task_id: str, text: str | None):
    """Set a task's note (omit TEXT to clear it)."""
    store = _open_store()
    try:
        store.set_details(_resolve_id(store, task_id), text or None)
    except TaskStoreError as e:
        _fail(str(e))
    click.echo("Details saved." if text else "Details cleared.")


@main.command()
@click.argument("task_id")
@click.argument("when", required=False)
@click.option("--clear", is_flag=True, help="Remove the due time")
def due(task_id: str, when: str | None, clear: bool):
    """Set or clear a task's due time."""
    if not clear and not when:
        _fail("Give a due time or --clear")
    new_due = None if clear else _parse_due(when)

    store = _open_store()
    try:
        task = store.set_due_time(_resolve_id(store, task_id), new_due)
    except TaskStoreError as e:
        _fail(str(e))

    if task.due_time:
        click.echo(f"Due {task.due_time.astimezone().strftime('%Y-%m-%d %H:%M')}: {task.text}")
    else:
        click.echo(f"Due time cleared: {task.text}")


@main.command()
@click.argument("task_id")
def rm(task_id: str):
    """Delete a task."""
    store = _open_store()
    try:
        resolved = _resolve_id(store, task_id)
        text = store.get(resolved).text
        store.delete(resolved)
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"Deleted: {text}")


@main.command()
@click.argument("from_position", type=int)
@click.argument("to_position", type=int)
def move(from_position: int, to_position: int):
    """Move a task to another position (1-based, as shown by list)."""
    store = _open_store()
    try:
        store.reorder(from_position - 1, to_position - 1)
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"Moved {from_position} -> {to_position}")


@main.command()
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
def clear(yes: bool):
    """Delete every task."""
    store = _open_store()
    if not yes and not click.confirm(f"Delete all {len(store)} tasks?"):
        return
    try:
        store.clear_all()
    except TaskStoreError as e:
        _fail(str(e))
    click.echo("All tasks deleted.")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def run(debug: bool):
    """Run the reminder daemon."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.INFO),
    )
    if not debug:
        # One line per tick otherwise.
        logging.getLogger("apscheduler").setLevel(logging.WARNING)

    click.echo(f"Watching {config.tasks_path} for due tasks...")
    click.echo("Press Ctrl+C to stop")
    run_reminders(config)
    click.echo("\nReminders stopped.")


@main.command("check-update")
def check_update():
    """Check whether a newer release is available."""
    config = load_config()
    info = check_for_updates(config)

    if info.error:
        _fail(f"Update check failed: {info.error}")
    if not info.has_update:
        click.echo(f"You are running the latest version (v{__version__}).")
        return

    click.echo(f"A new version ({info.latest_version}) is available!")
    if info.release_url:
        click.echo(info.release_url)
    if info.release_notes:
        click.echo(f"\n{info.release_notes.strip()}")


if __name__ == "__main__":
    main()
