"""Main entry point for the notification relay."""

import argparse
import logging
import os
import sys

from .config import AppConfig, load_config
from .notifier import LoggingNotificationCenter, NotificationMaterializer
from .ntfy_client import SubscriptionPoller
from .registration import register_device
from .relay import PollOrchestrator
from .store import SQLiteStore

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def build_orchestrator(config: AppConfig, store: SQLiteStore) -> PollOrchestrator:
    """Wire a poll orchestrator that shows notifications in the log."""
    poller = SubscriptionPoller(
        store,
        default_base_url=config.server.app_base_url,
        timeout=config.poll.timeout_seconds,
    )
    materializer = NotificationMaterializer(
        LoggingNotificationCenter(),
        default_base_url=config.server.app_base_url,
    )
    return PollOrchestrator(
        store,
        poller,
        materializer,
        poll_topic=config.poll.poll_topic,
        time_budget=config.poll.time_budget_seconds,
        max_workers=config.poll.max_workers,
    )


def run(args) -> int:
    """Run the command selected by the arguments and return an exit code."""
    try:
        config = load_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if args.register_token:
        return 0 if register_device(args.register_token, config.registration) else 1

    logger.info(f"Opening database at {config.db_path}...")
    store = SQLiteStore(config.db_path)
    try:
        base_url = (args.base_url or config.server.app_base_url).rstrip("/")

        if args.subscribe:
            subscription = store.add_subscription(base_url, args.subscribe)
            print(f"Subscribed to {base_url}/{subscription.topic} (id {subscription.id})")
            return 0

        if args.unsubscribe:
            if store.remove_subscription(base_url, args.unsubscribe):
                print(f"Unsubscribed from {base_url}/{args.unsubscribe}")
                return 0
            print(f"Not subscribed to {base_url}/{args.unsubscribe}")
            return 1

        if args.list:
            for subscription in store.get_subscriptions() or []:
                print(f"{subscription.id}\t{subscription.base_url}/{subscription.topic}")
            return 0

        # Behave as if a wake signal arrived on the poll topic
        orchestrator = build_orchestrator(config, store)
        result = orchestrator.handle_wake({"topic": config.poll.poll_topic})
        # Polls that outlived the budget still write to the store
        orchestrator.drain()
        print(result.value)
        return 0
    finally:
        store.close()


def main():
    """Main entry point with command-line argument parsing."""
    parser = argparse.ArgumentParser(
        description="Poll subscribed ntfy topics and show new messages as local notifications"
    )
    parser.add_argument(
        "--subscribe",
        metavar="TOPIC",
        help="Subscribe to a topic"
    )
    parser.add_argument(
        "--unsubscribe",
        metavar="TOPIC",
        help="Unsubscribe from a topic"
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Server of the topic for --subscribe/--unsubscribe (default: APP_BASE_URL env var or https://ntfy.sh)"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List subscriptions"
    )
    parser.add_argument(
        "--register-token",
        metavar="HEX",
        help="Register a device push token with the registration endpoint"
    )

    args = parser.parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
