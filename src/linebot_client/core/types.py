"""Shared constants and enumerations."""

from __future__ import annotations

from enum import StrEnum

VERSION = "0.3.0"
USER_AGENT = f"linebot-client/{VERSION}"

DEFAULT_ENDPOINT_BASE = "https://api.line.me"
DEFAULT_ENDPOINT_BASE_DATA = "https://api-data.line.me"

# Paths relative to the endpoint bases
ENDPOINT_PUSH_MESSAGE = "/v2/bot/message/push"
ENDPOINT_REPLY_MESSAGE = "/v2/bot/message/reply"
ENDPOINT_GET_PROFILE = "/v2/bot/profile/{user_id}"
ENDPOINT_GET_MESSAGE_CONTENT = "/v2/bot/message/{message_id}/content"


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    LOCATION = "location"
    STICKER = "sticker"


class ActionType(StrEnum):
    MESSAGE = "message"
    POSTBACK = "postback"
