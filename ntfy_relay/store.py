"""Store interface and its SQLite implementation."""

import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from . import db
from .codec import encode
from .models import Message, Subscription

logger = logging.getLogger(__name__)


class Store(ABC):
    """Abstract base class for subscription and message persistence."""

    @abstractmethod
    def get_subscriptions(self) -> Optional[List[Subscription]]:
        """Return all subscriptions, or None if the store is unavailable."""
        pass

    @abstractmethod
    def get_last_message_id(self, subscription: Subscription) -> Optional[str]:
        """Return the poll cursor for a subscription, or None to fetch everything cached."""
        pass

    @abstractmethod
    def save_messages(self, subscription: Subscription, messages: List[Message]) -> None:
        """Persist received messages, advancing the subscription's cursor."""
        pass


class SQLiteStore(Store):
    """Store backed by a SQLite database."""

    def __init__(self, db_path: str):
        self.conn = db.init_db(db_path)
        self._lock = threading.Lock()

    def get_subscriptions(self) -> Optional[List[Subscription]]:
        try:
            with self._lock:
                rows = db.get_subscriptions(self.conn)
        except sqlite3.Error as e:
            logger.error(f"Failed to load subscriptions: {e}")
            return None
        return [Subscription(id=sub_id, topic=topic, base_url=base_url) for sub_id, base_url, topic in rows]

    def get_last_message_id(self, subscription: Subscription) -> Optional[str]:
        with self._lock:
            return db.get_last_message_id(self.conn, subscription.id)

    def save_messages(self, subscription: Subscription, messages: List[Message]) -> None:
        rows = [(m.id, m.time, json.dumps(encode(m, subscription.base_url))) for m in messages]
        with self._lock:
            db.insert_messages(self.conn, subscription.id, rows)

    def add_subscription(self, base_url: str, topic: str) -> Subscription:
        with self._lock:
            sub_id = db.add_subscription(self.conn, base_url, topic)
        return Subscription(id=sub_id, topic=topic, base_url=base_url)

    def remove_subscription(self, base_url: str, topic: str) -> bool:
        with self._lock:
            return db.remove_subscription(self.conn, base_url, topic)

    def close(self) -> None:
        self.conn.close()
