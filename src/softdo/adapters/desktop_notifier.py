"""Desktop notification adapter - plyer wrapper for system notifications."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from plyer import notification

logger = logging.getLogger(__name__)


class NotificationDeliveryFailure(Exception):
    """Raised when the platform backend fails to show a notification."""

    pass


class DesktopNotifier:
    """
    plyer notification adapter.

    Implements NotificationSink protocol. notify() hands delivery to a single
    background worker and returns immediately; failures are logged, never
    raised to the caller.
    """

    def __init__(self, app_name: str = "SoftDo", timeout: int = 10):
        self.app_name = app_name
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="softdo-notify")

    def notify(self, title: str, body: str) -> Future:
        """Queue a notification. Returns the delivery future."""
        return self._executor.submit(self._deliver_logged, title, body)

    def deliver(self, title: str, body: str) -> bool:
        """
        Show a notification synchronously.

        Returns False when the platform has no notification support.
        Raises NotificationDeliveryFailure if the backend errors.
        """
        try:
            notification.notify(
                title=title,
                message=body,
                app_name=self.app_name,
                timeout=self.timeout,
            )
        except (NotImplementedError, ImportError) as e:
            logger.debug(f"Notifications not supported on this platform: {e}")
            return False
        except Exception as e:
            raise NotificationDeliveryFailure(str(e)) from e
        return True

    def _deliver_logged(self, title: str, body: str) -> bool:
        try:
            return self.deliver(title, body)
        except NotificationDeliveryFailure as e:
            logger.error(f"Failed to show notification {title!r}: {e}")
            return False

    def shutdown(self, wait: bool = True) -> None:
        """Stop the delivery worker."""
        self._executor.shutdown(wait=wait)


class NullNotifier:
    """Sink that drops every notification (notifications disabled)."""

    def notify(self, title: str, body: str) -> None:
        logger.debug(f"Notification dropped: {title}: {body}")

    def shutdown(self, wait: bool = True) -> None:
        pass
