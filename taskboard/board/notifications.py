"""User-visible, non-blocking notifications raised by board operations."""

import enum
import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


class NotificationLevel(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.ERROR: logging.ERROR,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.INFO: logging.INFO,
}


@dataclass
class Notification:
    level: NotificationLevel
    message: str


class Notifier:
    """Collects notifications for the page to display."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level, message)
        self.notifications.append(notification)
        logger.log(_LOG_LEVELS[level], f"[{level.value}] {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    def warning(self, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def messages(self, level: NotificationLevel = None) -> List[str]:
        return [n.message for n in self.notifications if level is None or n.level == level]

    def clear(self):
        self.notifications = []
