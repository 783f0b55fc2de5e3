"""Materializing polled messages as local notifications."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from .codec import encode
from .models import Message, NotificationNotice, Subscription
from .urls import topic_short_url

logger = logging.getLogger(__name__)


class NotificationCenter(ABC):
    """Abstract interface for the platform notification scheduler."""

    @abstractmethod
    def add(self, notice: NotificationNotice) -> None:
        """
        Show a notification immediately.

        Raises:
            Exception: If the platform refuses the notification.
        """
        pass


class LoggingNotificationCenter(NotificationCenter):
    """Writes each notification to the log."""

    def add(self, notice: NotificationNotice) -> None:
        logger.info(f"[{notice.identifier}] {notice.title}: {notice.body}")


class InMemoryNotificationCenter(NotificationCenter):
    """Keeps delivered notifications in a list."""

    def __init__(self):
        self.notices: List[NotificationNotice] = []
        self._lock = threading.Lock()

    def add(self, notice: NotificationNotice) -> None:
        with self._lock:
            self.notices.append(notice)


class NotificationMaterializer:
    """
    Turns polled messages into local notifications.

    The local notification must look exactly like the remote one (same
    payload), so that tapping it gives the dispatcher the same information.
    """

    def __init__(self, center: NotificationCenter, default_base_url: str):
        self.center = center
        self.default_base_url = default_base_url

    def build(self, subscription: Subscription, message: Message) -> NotificationNotice:
        """Build the notice for a message without showing it."""
        base_url = subscription.base_url or self.default_base_url
        title = message.title or topic_short_url(base_url, message.topic or subscription.topic)
        return NotificationNotice(
            identifier=message.id,
            title=title,
            body=message.message,
            payload=encode(message, base_url),
            base_url=base_url,
            priority=message.priority,
            tags=list(message.tags),
        )

    def materialize(self, subscription: Subscription, message: Message) -> Optional[NotificationNotice]:
        """
        Show a message as a notification right away.

        Returns:
            The scheduled notice, or None if building or scheduling failed.
        """
        try:
            notice = self.build(subscription, message)
            self.center.add(notice)
        except Exception as e:
            logger.error(f"Unable to create notification for message {message.id}: {e}")
            return None
        return notice
