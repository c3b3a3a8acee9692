"""Tests for the command line interface."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from softdo import __version__
from softdo.cli import main, parse_when
from softdo.config import Config
from softdo.core.updates import UpdateInfo
from softdo.workflows import get_store


@pytest.fixture
def config(tmp_path):
    return Config(tasks_file=str(tmp_path / "tasks.json"))


@pytest.fixture
def runner(config):
    with patch("softdo.cli.load_config", return_value=config):
        yield CliRunner()


def invoke(runner, *args, **kwargs):
    return runner.invoke(main, list(args), **kwargs)


def stored_tasks(config):
    return get_store(config).tasks


class TestParseWhen:
    @pytest.fixture
    def now(self):
        return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value, delta",
        [
            ("+90m", timedelta(minutes=90)),
            ("+2h", timedelta(hours=2)),
            ("+1d", timedelta(days=1)),
            ("+1h30m", timedelta(hours=1, minutes=30)),
            ("+45s", timedelta(seconds=45)),
        ],
    )
    def test_relative(self, now, value, delta):
        assert parse_when(value, now=now) == now + delta

    def test_iso_utc(self):
        assert parse_when("2025-01-15T14:00:00Z") == datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc)

    def test_naive_is_local(self):
        parsed = parse_when("2025-01-15 14:00")
        assert parsed.tzinfo is not None
        assert parsed.replace(tzinfo=None) == datetime(2025, 1, 15, 14, 0)

    @pytest.mark.parametrize("value", ["", "+", "tomorrow", "+5x"])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_when(value)


class TestAdd:
    def test_add(self, runner, config):
        result = invoke(runner, "add", "Buy milk", "--due", "+2h", "--details", "2 litres")
        assert result.exit_code == 0
        assert "Buy milk" in result.output

        [task] = stored_tasks(config)
        assert task.text == "Buy milk"
        assert task.details == "2 litres"
        assert task.due_time is not None

    def test_bad_due_time(self, runner, config):
        result = invoke(runner, "add", "Task", "--due", "whenever")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert stored_tasks(config) == []

    def test_empty_text(self, runner):
        result = invoke(runner, "add", "   ")
        assert result.exit_code == 1


class TestList:
    def test_empty(self, runner):
        result = invoke(runner, "list")
        assert result.exit_code == 0
        assert "No tasks." in result.output

    def test_shows_tasks_in_order(self, runner, config):
        invoke(runner, "add", "first")
        invoke(runner, "add", "second")
        store = get_store(config)
        store.toggle_completed(store.tasks[1].id)

        result = invoke(runner, "list")
        lines = result.output.splitlines()
        assert lines[0].startswith(" 1. [ ] first")
        assert lines[1].startswith(" 2. [x] second")
        assert "1 remaining" in result.output

    def test_pending_hides_completed(self, runner, config):
        invoke(runner, "add", "first")
        invoke(runner, "add", "second")
        store = get_store(config)
        store.toggle_completed(store.tasks[0].id)

        result = invoke(runner, "list", "--pending")
        assert "first" not in result.output
        assert " 2. [ ] second" in result.output

    def test_json(self, runner):
        invoke(runner, "add", "Task", "--due", "2025-01-15T14:00:00Z")
        result = invoke(runner, "list", "--json")
        [record] = json.loads(result.output)
        assert record["position"] == 1
        assert record["text"] == "Task"
        assert record["dueTime"] == "2025-01-15T14:00:00Z"


class TestEditCommands:
    @pytest.fixture
    def task_id(self, runner, config):
        invoke(runner, "add", "Task")
        return stored_tasks(config)[0].id

    def test_done_by_prefix(self, runner, config, task_id):
        result = invoke(runner, "done", task_id[:6])
        assert result.exit_code == 0
        assert "Completed: Task" in result.output
        assert stored_tasks(config)[0].completed is True

        result = invoke(runner, "done", task_id)
        assert "Reopened: Task" in result.output

    def test_unknown_id(self, runner, task_id):
        result = invoke(runner, "done", "zzzz")
        assert result.exit_code == 1
        assert "No task with id" in result.output

    def test_rename(self, runner, config, task_id):
        result = invoke(runner, "rename", task_id, "New name")
        assert result.exit_code == 0
        assert stored_tasks(config)[0].text == "New name"

    def test_details(self, runner, config, task_id):
        invoke(runner, "details", task_id, "Some note")
        assert stored_tasks(config)[0].details == "Some note"

        result = invoke(runner, "details", task_id)
        assert "Details cleared." in result.output
        assert stored_tasks(config)[0].details is None

    def test_due_set_and_clear(self, runner, config, task_id):
        result = invoke(runner, "due", task_id, "2025-01-15T14:00:00Z")
        assert result.exit_code == 0
        assert stored_tasks(config)[0].due_time == datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc)

        result = invoke(runner, "due", task_id, "--clear")
        assert "Due time cleared: Task" in result.output
        assert stored_tasks(config)[0].due_time is None

    def test_due_needs_value(self, runner, task_id):
        result = invoke(runner, "due", task_id)
        assert result.exit_code == 1

    def test_rm(self, runner, config, task_id):
        result = invoke(runner, "rm", task_id)
        assert "Deleted: Task" in result.output
        assert stored_tasks(config) == []


class TestMove:
    def test_move(self, runner, config):
        for text in ("a", "b", "c"):
            invoke(runner, "add", text)

        result = invoke(runner, "move", "1", "3")
        assert result.exit_code == 0
        assert [t.text for t in stored_tasks(config)] == ["b", "c", "a"]

    def test_out_of_range(self, runner, config):
        invoke(runner, "add", "a")
        result = invoke(runner, "move", "1", "5")
        assert result.exit_code == 1
        assert "Error" in result.output


class TestClear:
    def test_with_yes(self, runner, config):
        invoke(runner, "add", "a")
        invoke(runner, "add", "b")
        result = invoke(runner, "clear", "--yes")
        assert "All tasks deleted." in result.output
        assert stored_tasks(config) == []

    def test_declined(self, runner, config):
        invoke(runner, "add", "a")
        invoke(runner, "clear", input="n\n")
        assert len(stored_tasks(config)) == 1


class TestRun:
    @patch("softdo.cli.run_reminders")
    def test_starts_daemon(self, mock_run, runner, config):
        result = invoke(runner, "run")
        assert result.exit_code == 0
        mock_run.assert_called_once_with(config)
        assert "Reminders stopped." in result.output


class TestCheckUpdate:
    @patch("softdo.cli.check_for_updates")
    def test_up_to_date(self, mock_check, runner):
        mock_check.return_value = UpdateInfo(has_update=False)
        result = invoke(runner, "check-update")
        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    @patch("softdo.cli.check_for_updates")
    def test_new_version(self, mock_check, runner):
        mock_check.return_value = UpdateInfo(
            has_update=True,
            latest_version="v2.0.0",
            release_url="https://example.com/release",
            release_notes="Fixes",
        )
        result = invoke(runner, "check-update")
        assert "v2.0.0" in result.output
        assert "https://example.com/release" in result.output
        assert "Fixes" in result.output

    @patch("softdo.cli.check_for_updates")
    def test_network_error(self, mock_check, runner):
        mock_check.return_value = UpdateInfo(has_update=False, error="offline")
        result = invoke(runner, "check-update")
        assert result.exit_code == 1
        assert "offline" in result.output


def test_version(runner):
    result = invoke(runner, "--version")
    assert __version__ in result.output
