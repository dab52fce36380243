"""Outgoing message variants and their wire serialization.

Each variant is a frozen dataclass. ``message_to_dict`` is the single place
that knows the wire shape: ``type`` first, then the variant's own fields in
a fixed order, then ``quickReply`` when one is attached. Nothing is
validated client-side; the platform rejects bad content with an API error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Union

from linebot_client.core.types import ActionType, MessageType


@dataclass(frozen=True, slots=True)
class MessageAction:
    """Quick reply button that sends ``text`` as if the user typed it."""

    label: str
    text: str


@dataclass(frozen=True, slots=True)
class PostbackAction:
    """Quick reply button that delivers ``data`` to the webhook."""

    label: str
    data: str
    display_text: Optional[str] = None


Action = Union[MessageAction, PostbackAction]


@dataclass(frozen=True, slots=True)
class QuickReply:
    items: tuple[Action, ...] = ()


@dataclass(frozen=True, slots=True)
class TextMessage:
    type: ClassVar[MessageType] = MessageType.TEXT

    text: str
    quick_reply: Optional[QuickReply] = None


@dataclass(frozen=True, slots=True)
class ImageMessage:
    type: ClassVar[MessageType] = MessageType.IMAGE

    original_content_url: str
    preview_image_url: str
    quick_reply: Optional[QuickReply] = None


@dataclass(frozen=True, slots=True)
class VideoMessage:
    type: ClassVar[MessageType] = MessageType.VIDEO

    original_content_url: str
    preview_image_url: str
    quick_reply: Optional[QuickReply] = None


@dataclass(frozen=True, slots=True)
class AudioMessage:
    type: ClassVar[MessageType] = MessageType.AUDIO

    original_content_url: str
    duration: int  # milliseconds
    quick_reply: Optional[QuickReply] = None


@dataclass(frozen=True, slots=True)
class LocationMessage:
    type: ClassVar[MessageType] = MessageType.LOCATION

    title: str
    address: str
    latitude: float
    longitude: float
    quick_reply: Optional[QuickReply] = None


@dataclass(frozen=True, slots=True)
class StickerMessage:
    type: ClassVar[MessageType] = MessageType.STICKER

    package_id: str
    sticker_id: str
    quick_reply: Optional[QuickReply] = None


Message = Union[
    TextMessage,
    ImageMessage,
    VideoMessage,
    AudioMessage,
    LocationMessage,
    StickerMessage,
]


def action_to_dict(action: Action) -> dict[str, Any]:
    match action:
        case MessageAction(label=label, text=text):
            return {"type": ActionType.MESSAGE.value, "label": label, "text": text}
        case PostbackAction(label=label, data=data, display_text=display_text):
            payload: dict[str, Any] = {
                "type": ActionType.POSTBACK.value,
                "label": label,
                "data": data,
            }
            if display_text is not None:
                payload["displayText"] = display_text
            return payload
    raise TypeError(f"Unsupported action: {type(action).__name__}")


def quick_reply_to_dict(quick_reply: QuickReply) -> dict[str, Any]:
    return {"items": [{"type": "action", "action": action_to_dict(a)} for a in quick_reply.items]}


def message_to_dict(message: Message) -> dict[str, Any]:
    """Serialize one message to its wire object, ``type`` first."""
    payload: dict[str, Any]
    match message:
        case TextMessage():
            payload = {"type": MessageType.TEXT.value, "text": message.text}
        case ImageMessage() | VideoMessage():
            payload = {
                "type": message.type.value,
                "originalContentUrl": message.original_content_url,
                "previewImageUrl": message.preview_image_url,
            }
        case AudioMessage():
            payload = {
                "type": MessageType.AUDIO.value,
                "originalContentUrl": message.original_content_url,
                "duration": message.duration,
            }
        case LocationMessage():
            payload = {
                "type": MessageType.LOCATION.value,
                "title": message.title,
                "address": message.address,
                "latitude": message.latitude,
                "longitude": message.longitude,
            }
        case StickerMessage():
            payload = {
                "type": MessageType.STICKER.value,
                "packageId": message.package_id,
                "stickerId": message.sticker_id,
            }
        case _:
            raise TypeError(f"Unsupported message: {type(message).__name__}")

    if message.quick_reply is not None:
        payload["quickReply"] = quick_reply_to_dict(message.quick_reply)
    return payload
