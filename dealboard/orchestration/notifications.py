"""User-visible notifications raised by board operations."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock


class NotificationLevel(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    title: str
    description: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """Bounded buffer of notifications waiting to be shown."""

    def __init__(self, maxlen: int = 50) -> None:
        self._items: deque[Notification] = deque(maxlen=maxlen)
        self._lock = Lock()

    def publish(self, notification: Notification) -> Notification:
        with self._lock:
            self._items.append(notification)
        return notification

    def success(self, description: str, title: str = "Success") -> Notification:
        return self.publish(Notification(NotificationLevel.SUCCESS, title, description))

    def error(self, description: str, title: str = "Error") -> Notification:
        return self.publish(Notification(NotificationLevel.ERROR, title, description))

    def drain(self) -> list[Notification]:
        with self._lock:
            items = list(self._items)
            self._items.clear()
            return items
