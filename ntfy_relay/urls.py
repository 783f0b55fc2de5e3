"""Helpers for building topic URLs."""

from urllib.parse import urlparse


def topic_url(base_url: str, topic: str) -> str:
    """Return the full URL of a topic, e.g. https://ntfy.sh/alerts."""
    return f"{base_url.rstrip('/')}/{topic}"


def topic_short_url(base_url: str, topic: str) -> str:
    """Return the topic URL without scheme, e.g. ntfy.sh/alerts."""
    parsed = urlparse(base_url)
    host = parsed.netloc or parsed.path
    return f"{host.rstrip('/')}/{topic}"
