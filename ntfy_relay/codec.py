"""
Conversion between messages and notification payloads.

A locally created notification has to carry exactly the payload a remote
notification would have carried, so that tapping it can rebuild the message
without a network round-trip. Payload values are limited to strings, numbers,
booleans and lists, which every notification backend stores verbatim.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import Action, Attachment, Message

logger = logging.getLogger(__name__)


def encode(message: Message, base_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Encode a message as a flat notification payload.

    Args:
        message: The message to encode.
        base_url: Base URL of the owning subscription, stored as `base_url`.

    Returns:
        A payload dict that `decode` turns back into an equal message.
    """
    payload: Dict[str, Any] = {
        "id": message.id,
        "time": message.time,
        "event": message.event,
        "topic": message.topic,
        "title": message.title,
        "message": message.message,
        "tags": list(message.tags),
    }
    if message.click is not None:
        payload["click"] = message.click
    if message.priority is not None:
        payload["priority"] = message.priority
    if message.actions is not None:
        payload["actions"] = json.dumps([_encode_action(a) for a in message.actions])
    if message.attachment is not None:
        attachment = message.attachment
        payload["attachment_name"] = attachment.name
        payload["attachment_url"] = attachment.url
        if attachment.type is not None:
            payload["attachment_type"] = attachment.type
        if attachment.size is not None:
            payload["attachment_size"] = attachment.size
        if attachment.expires is not None:
            payload["attachment_expires"] = attachment.expires
    if base_url:
        payload["base_url"] = base_url
    return payload


def decode(payload: Mapping[str, Any]) -> Optional[Message]:
    """
    Decode a notification payload back into a message.

    Unknown keys are ignored and missing optional keys fall back to defaults,
    so payloads from newer or older servers still decode. Also accepts the
    JSON objects returned by the ntfy poll endpoint (nested `attachment`,
    `actions` as a list, `tags` as a list).

    Args:
        payload: The payload dict.

    Returns:
        The decoded message, or None if the payload cannot be resolved.
    """
    if not isinstance(payload, Mapping):
        logger.warning(f"Cannot decode payload of type {type(payload).__name__}")
        return None

    message_id = payload.get("id")
    if not isinstance(message_id, str) or not message_id:
        logger.warning(f"Payload has no usable id: {message_id!r}")
        return None

    try:
        return Message(
            id=message_id,
            topic=_as_str(payload.get("topic")),
            time=int(payload.get("time") or 0),
            event=_as_str(payload["event"]) if "event" in payload else "message",
            title=_as_str(payload.get("title")),
            message=_as_str(payload.get("message")),
            click=_as_optional_str(payload.get("click")),
            priority=_as_optional_int(payload.get("priority")),
            tags=_decode_tags(payload.get("tags")),
            actions=_decode_actions(payload.get("actions")),
            attachment=_decode_attachment(payload),
        )
    except (ValueError, TypeError, KeyError) as e:
        logger.warning(f"Cannot decode payload for message {message_id}: {e}")
        return None


def _encode_action(action: Action) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": action.id,
        "action": action.action,
        "label": action.label,
        "clear": action.clear,
    }
    if action.url is not None:
        data["url"] = action.url
    if action.method is not None:
        data["method"] = action.method
    if action.headers:
        data["headers"] = dict(action.headers)
    if action.body is not None:
        data["body"] = action.body
    if action.extras:
        data["extras"] = dict(action.extras)
    return data


def _decode_action(data: Mapping[str, Any]) -> Action:
    if not isinstance(data, Mapping):
        raise TypeError(f"action must be an object, got {type(data).__name__}")
    return Action(
        id=str(data["id"]),
        action=str(data["action"]),
        label=_as_str(data.get("label")),
        url=_as_optional_str(data.get("url")),
        method=_as_optional_str(data.get("method")),
        headers=_as_str_dict(data.get("headers"), "headers"),
        body=_as_optional_str(data.get("body")),
        clear=bool(data.get("clear", False)),
        extras=_as_str_dict(data.get("extras"), "extras"),
    )


def _decode_actions(value: Any) -> Optional[List[Action]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = json.loads(value)  # json.JSONDecodeError is a ValueError
    if not isinstance(value, list):
        raise TypeError(f"actions must be a list, got {type(value).__name__}")
    return [_decode_action(item) for item in value]


def _decode_tags(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if not isinstance(value, list):
        raise TypeError(f"tags must be a list, got {type(value).__name__}")
    return [str(tag) for tag in value]


def _decode_attachment(payload: Mapping[str, Any]) -> Optional[Attachment]:
    nested = payload.get("attachment")
    if isinstance(nested, Mapping):
        source = {f"attachment_{k}": v for k, v in nested.items()}
    else:
        source = payload
    if "attachment_url" not in source and "attachment_name" not in source:
        return None
    return Attachment(
        name=_as_str(source.get("attachment_name")),
        url=_as_str(source.get("attachment_url")),
        type=_as_optional_str(source.get("attachment_type")),
        size=_as_optional_int(source.get("attachment_size")),
        expires=_as_optional_int(source.get("attachment_expires")),
    )


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _as_str_dict(value: Any, name: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be an object, got {type(value).__name__}")
    return {str(k): str(v) for k, v in value.items()}
