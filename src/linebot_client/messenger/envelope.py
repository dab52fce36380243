"""Request envelopes for the push and reply endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from linebot_client.messenger.models import Message, message_to_dict


def encode_json(payload: dict[str, Any]) -> bytes:
    """Compact UTF-8 JSON followed by a newline."""
    return (json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")


@dataclass(frozen=True, slots=True)
class PushEnvelope:
    to: str
    messages: tuple[Message, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"to": self.to, "messages": [message_to_dict(m) for m in self.messages]}

    def encode(self) -> bytes:
        return encode_json(self.to_dict())


@dataclass(frozen=True, slots=True)
class ReplyEnvelope:
    reply_token: str
    messages: tuple[Message, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "replyToken": self.reply_token,
            "messages": [message_to_dict(m) for m in self.messages],
        }

    def encode(self) -> bytes:
        return encode_json(self.to_dict())


Envelope = PushEnvelope | ReplyEnvelope
