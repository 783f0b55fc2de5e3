"""Data models for subscriptions, messages and notifications."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Action kinds
ACTION_VIEW = "view"
ACTION_HTTP = "http"
ACTION_BROADCAST = "broadcast"


@dataclass
class Subscription:
    """A followed remote topic plus the server hosting it."""
    id: int
    topic: str
    base_url: Optional[str] = None


@dataclass
class Action:
    """A user-invocable operation bound to a message, tagged by `action`."""
    id: str
    action: str        # "view", "http" or "broadcast"
    label: str = ""
    url: Optional[str] = None
    method: Optional[str] = None   # http only, defaults to POST
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    clear: bool = False
    extras: Dict[str, str] = field(default_factory=dict)  # broadcast only


@dataclass
class Attachment:
    """Attachment descriptor; the file itself is never downloaded here."""
    name: str
    url: str
    type: Optional[str] = None
    size: Optional[int] = None
    expires: Optional[int] = None


@dataclass
class Message:
    """One unit of remote content."""
    id: str
    topic: str
    time: int = 0      # unix seconds
    event: str = "message"
    title: str = ""
    message: str = ""
    click: Optional[str] = None
    priority: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    actions: Optional[List[Action]] = None
    attachment: Optional[Attachment] = None


@dataclass
class NotificationNotice:
    """A materialized local notification, owned by the notification center."""
    identifier: str
    title: str
    body: str
    payload: Dict[str, Any]
    base_url: str
    priority: Optional[int] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class PollResult:
    """Outcome of polling one subscription; errors become an empty result."""
    subscription: Subscription
    messages: List[Message] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FetchResult(str, Enum):
    """Completion reported to the push-wake collaborator."""

    NEW_DATA = "new_data"
    NO_DATA = "no_data"


@dataclass
class InteractionResult:
    """Navigation intent produced by a notification tap."""
    message: Optional[Message] = None
    topic_url: Optional[str] = None
    action: Optional[Action] = None
    opened_url: Optional[str] = None
