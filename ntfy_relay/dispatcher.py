"""Handling delivery of and taps on notifications."""

import logging
import threading
import webbrowser
from enum import Flag, auto
from typing import Any, Callable, List, Mapping, Optional

from .actions import ActionExecutor, LinkOpener, resolve_action
from .codec import decode
from .models import InteractionResult
from .urls import topic_url

logger = logging.getLogger(__name__)


class PresentationOptions(Flag):
    """How a notification is shown while the app is in the foreground."""

    NONE = 0
    BANNER = auto()
    SOUND = auto()
    BADGE = auto()


class SelectedTopic:
    """
    Single-slot channel holding the topic URL the UI should navigate to.

    Writes are serialized, so with rapid taps the last one wins. Observers are
    called with the new value after each write.
    """

    def __init__(self):
        self._value: Optional[str] = None
        self._lock = threading.RLock()
        self._observers: List[Callable[[str], None]] = []

    def get(self) -> Optional[str]:
        with self._lock:
            return self._value

    def set(self, url: str) -> None:
        with self._lock:
            self._value = url
            # Notify under the lock so observers see writes in order
            for observer in self._observers:
                try:
                    observer(url)
                except Exception as e:
                    logger.error(f"Selected topic observer failed for {url}: {e}")

    def subscribe(self, observer: Callable[[str], None]) -> None:
        with self._lock:
            self._observers.append(observer)


class BrowserLinkOpener(LinkOpener):
    """Opens links in the system web browser."""

    def open(self, url: str) -> bool:
        return webbrowser.open(url)


class InteractionDispatcher:
    """Routes notification deliveries and taps."""

    def __init__(
        self,
        selected_topic: SelectedTopic,
        action_executor: ActionExecutor,
        link_opener: LinkOpener,
        default_base_url: str,
    ):
        self.selected_topic = selected_topic
        self.action_executor = action_executor
        self.link_opener = link_opener
        self.default_base_url = default_base_url

    def will_present(
        self,
        payload: Mapping[str, Any],
        completion_handler: Callable[[PresentationOptions], None],
    ) -> PresentationOptions:
        """Notification arrived while the app is active; always show it."""
        logger.debug(f"Notification received in foreground: {payload}")
        options = PresentationOptions.BANNER | PresentationOptions.SOUND
        completion_handler(options)
        return options

    def did_receive(
        self,
        payload: Mapping[str, Any],
        action_identifier: Optional[str],
        completion_handler: Callable[[], None],
    ) -> InteractionResult:
        """
        The user tapped a notification or one of its action buttons.

        Args:
            payload: The notification payload.
            action_identifier: Identifier of the pressed button, or the
                body-tap sentinel.
            completion_handler: Called exactly once, in every branch.

        Returns:
            The navigation intent derived from the tap.
        """
        try:
            return self._dispatch(payload, action_identifier)
        except Exception as e:
            logger.error(f"Failed to handle notification tap: {e}", exc_info=True)
            return InteractionResult()
        finally:
            completion_handler()

    def _dispatch(self, payload: Mapping[str, Any], action_identifier: Optional[str]) -> InteractionResult:
        message = decode(payload)
        if message is None:
            logger.warning(f"Cannot convert payload to message: {payload}")
            return InteractionResult()

        base_url = payload.get("base_url") or self.default_base_url
        result = InteractionResult(message=message)

        # Show current topic
        if message.topic:
            result.topic_url = topic_url(base_url, message.topic)
            self.selected_topic.set(result.topic_url)

        # Execute user action or click action (if any)
        action = resolve_action(message.actions, action_identifier)
        if action is not None:
            result.action = action
            self.action_executor.execute(action)
        elif message.click:
            result.opened_url = message.click
            try:
                self.link_opener.open(message.click)
            except Exception as e:
                logger.error(f"Failed to open click URL {message.click}: {e}")

        return result
