"""Tests for the notification adapters."""

from unittest.mock import patch

import pytest

from softdo.adapters.desktop_notifier import (
    DesktopNotifier,
    NotificationDeliveryFailure,
    NullNotifier,
)


@pytest.fixture
def notifier():
    n = DesktopNotifier(app_name="SoftDo", timeout=7)
    yield n
    n.shutdown()


class TestDesktopNotifier:
    @patch("softdo.adapters.desktop_notifier.notification")
    def test_deliver(self, mock_notification, notifier):
        assert notifier.deliver("Title", "Body") is True
        mock_notification.notify.assert_called_once_with(
            title="Title",
            message="Body",
            app_name="SoftDo",
            timeout=7,
        )

    @patch("softdo.adapters.desktop_notifier.notification")
    def test_unsupported_platform(self, mock_notification, notifier):
        mock_notification.notify.side_effect = NotImplementedError("no backend")
        assert notifier.deliver("Title", "Body") is False

    @patch("softdo.adapters.desktop_notifier.notification")
    def test_backend_error_raises(self, mock_notification, notifier):
        mock_notification.notify.side_effect = RuntimeError("dbus down")
        with pytest.raises(NotificationDeliveryFailure, match="dbus down"):
            notifier.deliver("Title", "Body")

    @patch("softdo.adapters.desktop_notifier.notification")
    def test_notify_runs_in_background(self, mock_notification, notifier):
        future = notifier.notify("Title", "Body")
        assert future.result(timeout=5) is True
        mock_notification.notify.assert_called_once()

    @patch("softdo.adapters.desktop_notifier.notification")
    def test_notify_logs_failures(self, mock_notification, notifier):
        mock_notification.notify.side_effect = RuntimeError("dbus down")
        assert notifier.notify("Title", "Body").result(timeout=5) is False


class TestNullNotifier:
    def test_drops_silently(self):
        sink = NullNotifier()
        assert sink.notify("Title", "Body") is None
        sink.shutdown()
