"""ntfy client for polling a subscription's topic for new messages."""

import json
import logging
from typing import List, Optional

import requests

from .codec import decode
from .models import Message, PollResult, Subscription
from .store import Store
from .urls import topic_url

logger = logging.getLogger(__name__)


class SubscriptionPoller:
    """Fetches messages newer than a subscription's cursor."""

    def __init__(
        self,
        store: Store,
        default_base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the poller.

        Args:
            store: Owns the per-subscription cursor and receives new messages.
            default_base_url: Used for subscriptions without a base URL.
            timeout: HTTP timeout in seconds.
            session: HTTP session, a new one is created if omitted.
        """
        self.store = store
        self.default_base_url = default_base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def poll(self, subscription: Subscription) -> List[Message]:
        """
        Return new messages for a subscription, oldest first.

        Never raises: a failed poll returns an empty list.
        """
        return self.fetch(subscription).messages

    def fetch(self, subscription: Subscription) -> PollResult:
        """
        Poll a subscription and report the outcome.

        Args:
            subscription: The subscription to poll.

        Returns:
            A PollResult; on failure `messages` is empty and `error` is set.
        """
        base_url = subscription.base_url or self.default_base_url
        url = f"{topic_url(base_url, subscription.topic)}/json"
        params = {"poll": "1"}

        try:
            since = self.store.get_last_message_id(subscription)
            if since:
                params["since"] = since

            logger.info(f"Polling {url} (since={since or 'all'})")
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            messages = self._parse_messages(response.text, subscription)
        except Exception as e:
            logger.error(f"Error polling subscription {subscription.id} ({url}): {e}")
            return PollResult(subscription=subscription, error=str(e))

        if messages:
            try:
                self.store.save_messages(subscription, messages)
            except Exception as e:
                logger.warning(f"Could not store {len(messages)} messages for subscription {subscription.id}: {e}")

        logger.info(f"Received {len(messages)} new messages from {url}")
        return PollResult(subscription=subscription, messages=messages)

    def _parse_messages(self, body: str, subscription: Subscription) -> List[Message]:
        """Parse a newline-delimited JSON poll response."""
        messages = []
        for line in body.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except ValueError as e:
                logger.debug(f"Skipping unparseable line from {subscription.topic}: {e}")
                continue
            if not isinstance(data, dict) or data.get("event", "message") != "message":
                continue

            message = decode(data)
            if message is None:
                continue
            if not message.topic:
                message.topic = subscription.topic
            messages.append(message)

        # sorted() is stable, so ties keep server order
        return sorted(messages, key=lambda m: m.time)
