"""In-process notification queue for one edit session (toast messages)."""

from collections import deque
from typing import Any

from product_console.domain.entities import Notification, NotificationLevel


class NotificationCenter:
    """Collects notifications until the rendering layer drains them."""

    def __init__(self, max_pending: int = 50) -> None:
        self._pending: deque[Notification] = deque(maxlen=max_pending)

    def publish(self, notification: Notification) -> None:
        self._pending.append(notification)

    def success(self, message: str, **data: Any) -> None:
        self.publish(Notification(NotificationLevel.SUCCESS, message, data))

    def error(self, message: str, **data: Any) -> None:
        self.publish(Notification(NotificationLevel.ERROR, message, data))

    def info(self, message: str, **data: Any) -> None:
        self.publish(Notification(NotificationLevel.INFO, message, data))

    def drain(self) -> list[Notification]:
        """Return and forget everything published so far."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)
