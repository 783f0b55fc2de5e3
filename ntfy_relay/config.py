"""Configuration management."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ServerConfig:
    """Default server configuration."""
    app_base_url: str  # used when a payload or subscription carries no base URL


@dataclass
class PollConfig:
    """Polling configuration."""
    poll_topic: str             # reserved control topic, see ntfy server if ever changed
    timeout_seconds: float      # per-request HTTP timeout
    time_budget_seconds: float  # platform budget for a whole poll cycle
    max_workers: int = 4


@dataclass
class RegistrationConfig:
    """Push-token registration configuration."""
    endpoint: str
    timeout_seconds: float = 10.0


@dataclass
class AppConfig:
    """Complete application configuration."""
    db_path: str
    server: ServerConfig
    poll: PollConfig
    registration: RegistrationConfig


def _parse_number_env(key: str, default: str, cast=float, minimum=None):
    """Parse a numeric environment variable, naming the variable on failure."""
    raw = os.getenv(key, default)
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {key}: {raw!r}")
    if minimum is not None and value < minimum:
        raise ValueError(f"{key} must be at least {minimum}, got {value}")
    return value


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.

    Raises:
        ValueError: If a numeric value cannot be parsed or is out of range.
    """
    db_path = os.getenv("DB_PATH", "ntfy_relay.db")

    app_base_url = os.getenv("APP_BASE_URL", "https://ntfy.sh").rstrip("/")

    poll_topic = os.getenv("POLL_TOPIC", "~poll")
    poll_timeout = _parse_number_env("POLL_TIMEOUT_SECONDS", "10", minimum=0.1)
    time_budget = _parse_number_env("POLL_TIME_BUDGET_SECONDS", "25", minimum=1)
    max_workers = _parse_number_env("POLL_MAX_WORKERS", "4", cast=int, minimum=1)

    registration_url = os.getenv("REGISTRATION_URL", "https://pkg.rheoli.net")
    registration_timeout = _parse_number_env("REGISTRATION_TIMEOUT_SECONDS", "10", minimum=0.1)

    return AppConfig(
        db_path=db_path,
        server=ServerConfig(app_base_url=app_base_url),
        poll=PollConfig(
            poll_topic=poll_topic,
            timeout_seconds=poll_timeout,
            time_budget_seconds=time_budget,
            max_workers=max_workers,
        ),
        registration=RegistrationConfig(
            endpoint=registration_url,
            timeout_seconds=registration_timeout,
        ),
    )
