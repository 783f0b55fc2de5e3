"""Poll orchestration triggered by control-topic wake signals."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Mapping, Optional

from .models import FetchResult, Subscription
from .notifier import NotificationMaterializer
from .store import Store

logger = logging.getLogger(__name__)

POLL_TOPIC = "~poll"  # See ntfy server if ever changed


class PollOrchestrator:
    """
    Polls every subscription when a wake signal arrives on the poll topic.

    Subscriptions are polled concurrently and independently. Messages of one
    subscription are materialized in fetch order; there is no ordering across
    subscriptions.
    """

    def __init__(
        self,
        store: Store,
        poller,
        materializer: NotificationMaterializer,
        poll_topic: str = POLL_TOPIC,
        time_budget: float = 25.0,
        max_workers: int = 4,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Source of subscriptions.
            poller: Object with `poll(subscription) -> List[Message]`.
            materializer: Shows each polled message.
            poll_topic: Reserved control topic.
            time_budget: Seconds the platform allows for a full cycle.
            max_workers: Maximum number of concurrent polls.
        """
        self.store = store
        self.poller = poller
        self.materializer = materializer
        self.poll_topic = poll_topic
        self.time_budget = time_budget
        self.max_workers = max_workers
        self._unfinished = set()

    def handle_wake(
        self,
        payload: Mapping[str, Any],
        completion_handler: Optional[Callable[[FetchResult], None]] = None,
    ) -> FetchResult:
        """
        Handle a background wake signal.

        Args:
            payload: Key/value payload of the signal; only `topic` is inspected.
            completion_handler: Called exactly once with the result, after all
                polls have settled or the time budget ran out.

        Returns:
            NEW_DATA once all subscriptions were attempted, NO_DATA otherwise.
        """
        result = FetchResult.NO_DATA
        try:
            result = self._handle(payload)
        except Exception as e:
            logger.error(f"Poll cycle failed: {e}", exc_info=True)
            result = FetchResult.NO_DATA
        finally:
            if completion_handler is not None:
                completion_handler(result)
        return result

    def _handle(self, payload: Mapping[str, Any]) -> FetchResult:
        topic = payload.get("topic", "") if isinstance(payload, Mapping) else ""
        if topic != self.poll_topic:
            logger.debug(f"Ignoring background notification for topic {topic!r}")
            return FetchResult.NO_DATA

        subscriptions = self.store.get_subscriptions()
        if not subscriptions:
            logger.info("Poll requested, but there are no subscriptions")
            return FetchResult.NO_DATA

        logger.info(f"Polling {len(subscriptions)} subscription(s)")
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(subscriptions)),
            thread_name_prefix="poll",
        )
        try:
            futures = {
                executor.submit(self._poll_and_show, subscription): subscription
                for subscription in subscriptions
            }
            done, not_done = wait(futures, timeout=self.time_budget)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for future in done:
            error = future.exception()
            if error is not None:
                subscription = futures[future]
                logger.error(f"Polling subscription {subscription.id} ({subscription.topic}) failed: {error}")

        if not_done:
            self._unfinished.update(not_done)
            logger.warning(
                f"Poll cycle exceeded its {self.time_budget}s budget, "
                f"{len(not_done)} of {len(futures)} subscription(s) unfinished"
            )
            return FetchResult.NO_DATA

        return FetchResult.NEW_DATA

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for polls left running after a cycle ran out of time.

        Call before closing the store those polls write to.

        Returns:
            True if no poll is still running.
        """
        pending = list(self._unfinished)
        if not pending:
            return True
        done, not_done = wait(pending, timeout=timeout)
        self._unfinished.difference_update(done)
        return not not_done

    def _poll_and_show(self, subscription: Subscription) -> int:
        messages = self.poller.poll(subscription)
        shown = 0
        for message in messages:
            if self.materializer.materialize(subscription, message) is not None:
                shown += 1
        return shown
