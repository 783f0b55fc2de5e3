"""Registering the device push token with the relay server."""

import json
import logging
import threading
from typing import Optional, Union

import requests

from .config import RegistrationConfig

logger = logging.getLogger(__name__)


def register_device(
    token: Union[bytes, str],
    config: RegistrationConfig,
    session: Optional[requests.Session] = None,
) -> bool:
    """
    Send the device token to the registration endpoint, once.

    Best effort: every failure is logged and reported as False, nothing is
    retried and nothing is raised.

    Args:
        token: Raw token bytes as delivered by the platform, or its hex string.
        config: Registration configuration.
        session: HTTP session, `requests` module-level API if omitted.

    Returns:
        True if the server answered with a 2xx status.
    """
    hex_token = token.hex() if isinstance(token, (bytes, bytearray)) else token
    logger.debug(f"Registered for remote notifications, passing token to {config.endpoint}: {hex_token}")

    try:
        body = json.dumps({"device": hex_token})
    except (TypeError, ValueError) as e:
        logger.error(f"Error serializing registration payload: {e}")
        return False

    http = session or requests
    try:
        response = http.post(
            config.endpoint,
            data=body,
            headers={"Content-Type": "application/json"},
            timeout=config.timeout_seconds,
        )
    except requests.RequestException as e:
        logger.error(f"Device registration failed: {e}")
        return False

    if not 200 <= response.status_code < 300:
        logger.error(f"Device registration rejected with HTTP {response.status_code}: {response.text[:200]}")
        return False

    logger.info(f"Device registered with {config.endpoint}")
    return True


def register_device_in_background(
    token: Union[bytes, str],
    config: RegistrationConfig,
    session: Optional[requests.Session] = None,
) -> threading.Thread:
    """Run `register_device` on a daemon thread so startup never waits on it."""
    thread = threading.Thread(
        target=register_device,
        args=(token, config, session),
        name="device-registration",
        daemon=True,
    )
    thread.start()
    return thread
