"""Shared fixtures: model factories and mock collaborators."""

from unittest.mock import MagicMock

import pytest

from ntfy_relay.models import Action, Attachment, Message, Subscription
from ntfy_relay.notifier import InMemoryNotificationCenter
from ntfy_relay.store import Store


@pytest.fixture
def make_subscription():
    """Factory for Subscription instances."""

    def _make(sub_id: int = 1, topic: str = "alerts", base_url: str = "https://example.org") -> Subscription:
        return Subscription(id=sub_id, topic=topic, base_url=base_url)

    return _make


@pytest.fixture
def make_message():
    """Factory for Message instances."""

    def _make(message_id: str = "msg1", topic: str = "alerts", **kwargs) -> Message:
        defaults = {
            "time": 1700000000,
            "title": "Disk almost full",
            "message": "Only 2% left on /var",
        }
        defaults.update(kwargs)
        return Message(id=message_id, topic=topic, **defaults)

    return _make


@pytest.fixture
def full_message():
    """A message with every optional field set."""
    return Message(
        id="Xq2Lp0bC",
        topic="backups",
        time=1700000123,
        title="Backup done",
        message="Nightly backup finished\nin 3m 12s",
        click="https://example.org/backups/42",
        priority=4,
        tags=["white_check_mark", "backup"],
        actions=[
            Action(id="a1", action="view", label="Open", url="https://example.org/logs", clear=True),
            Action(
                id="a2",
                action="http",
                label="Retry",
                url="https://api.example.org/retry",
                method="PUT",
                headers={"Authorization": "Bearer abc"},
                body='{"job": 42}',
            ),
            Action(id="a3", action="broadcast", label="Tell", extras={"cmd": "ping"}),
        ],
        attachment=Attachment(
            name="report.pdf",
            url="https://example.org/file/report.pdf",
            type="application/pdf",
            size=20480,
            expires=1700086523,
        ),
    )


@pytest.fixture
def mock_store():
    """Mock Store with no subscriptions and no cursor."""
    store = MagicMock(spec=Store)
    store.get_subscriptions.return_value = []
    store.get_last_message_id.return_value = None
    return store


@pytest.fixture
def notification_center():
    return InMemoryNotificationCenter()
