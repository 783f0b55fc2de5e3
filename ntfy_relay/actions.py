"""Resolving and executing user actions bound to a message."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import requests

from .models import ACTION_BROADCAST, ACTION_HTTP, ACTION_VIEW, Action

logger = logging.getLogger(__name__)

# Identifier reported when the notification body was tapped, not a button.
DEFAULT_ACTION_IDENTIFIER = "default"

# Identifier reported when the notification was dismissed.
DISMISS_ACTION_IDENTIFIER = "dismiss"


def resolve_action(
    actions: Optional[Iterable[Action]],
    action_identifier: Optional[str],
) -> Optional[Action]:
    """
    Find the action the user invoked.

    Args:
        actions: The message's action list, may be None.
        action_identifier: Identifier reported by the interaction. None or one
            of the body-tap/dismiss sentinels means no button was pressed.

    Returns:
        The first action whose id matches, or None to fall back to the click
        target.
    """
    if not actions or not action_identifier:
        return None
    if action_identifier in (DEFAULT_ACTION_IDENTIFIER, DISMISS_ACTION_IDENTIFIER):
        return None
    for action in actions:
        if action.id == action_identifier:
            return action
    return None


class LinkOpener(ABC):
    """Abstract interface for opening an external link."""

    @abstractmethod
    def open(self, url: str) -> bool:
        """
        Open a URL outside the app.

        Returns:
            True if the link was handed off.
        """
        pass


class ActionExecutor(ABC):
    """Abstract interface for executing a resolved action."""

    @abstractmethod
    def execute(self, action: Action) -> None:
        """Execute an action. Must not raise."""
        pass


class DefaultActionExecutor(ActionExecutor):
    """Executes view and http actions; broadcast is not available on this client."""

    DEFAULT_HTTP_METHOD = "POST"

    def __init__(
        self,
        link_opener: LinkOpener,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the executor.

        Args:
            link_opener: Used for view actions.
            session: HTTP session for http actions.
            timeout: Request timeout in seconds.
        """
        self.link_opener = link_opener
        self.session = session or requests.Session()
        self.timeout = timeout

    def execute(self, action: Action) -> None:
        logger.info(f"Executing {action.action} action {action.id} ({action.label})")
        if action.action == ACTION_VIEW:
            self._view(action)
        elif action.action == ACTION_HTTP:
            self._http(action)
        elif action.action == ACTION_BROADCAST:
            logger.warning(f"Broadcast action {action.id} is not supported on this client")
        else:
            logger.warning(f"Unknown action type {action.action!r} for action {action.id}")

    def _view(self, action: Action) -> None:
        if not action.url:
            logger.warning(f"View action {action.id} has no URL")
            return
        try:
            self.link_opener.open(action.url)
        except Exception as e:
            logger.error(f"Failed to open {action.url} for action {action.id}: {e}")

    def _http(self, action: Action) -> None:
        if not action.url:
            logger.warning(f"HTTP action {action.id} has no URL")
            return
        method = (action.method or self.DEFAULT_HTTP_METHOD).upper()
        try:
            response = self.session.request(
                method,
                action.url,
                headers=action.headers or None,
                data=action.body.encode("utf-8") if action.body else None,
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info(f"HTTP action {action.id} succeeded: {method} {action.url} -> {response.status_code}")
        except requests.RequestException as e:
            logger.error(f"HTTP action {action.id} failed: {method} {action.url}: {e}")
