"""LINE Messaging API client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from urllib.parse import quote

import httpx

from linebot_client.api.call import Call
from linebot_client.api.decoder import (
    decode_basic_response,
    decode_message_content_response,
    decode_user_profile_response,
)
from linebot_client.api.responses import BasicResponse, MessageContentResponse, UserProfileResponse
from linebot_client.api.transport import HttpxTransport, Transport
from linebot_client.core.types import (
    DEFAULT_ENDPOINT_BASE,
    DEFAULT_ENDPOINT_BASE_DATA,
    ENDPOINT_GET_MESSAGE_CONTENT,
    ENDPOINT_GET_PROFILE,
    ENDPOINT_PUSH_MESSAGE,
    ENDPOINT_REPLY_MESSAGE,
    USER_AGENT,
)
from linebot_client.messenger.envelope import Envelope, PushEnvelope, ReplyEnvelope
from linebot_client.messenger.models import Message
from linebot_client.signature import validate_signature

if TYPE_CHECKING:
    from linebot_client.config import LineConfig

_JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


class LineBotClient:
    """Builds calls against the LINE Messaging API.

    Methods return inert ``Call`` objects; nothing is sent until
    ``await call.execute()``. The client owns its default transport and
    should be closed with ``aclose()`` or used as an async context manager.
    """

    def __init__(
        self,
        channel_secret: str,
        channel_access_token: str,
        *,
        endpoint_base: str = DEFAULT_ENDPOINT_BASE,
        endpoint_base_data: str = DEFAULT_ENDPOINT_BASE_DATA,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[Transport] = None,
    ):
        if not channel_secret:
            raise ValueError("LINE channel secret is not configured")
        if not channel_access_token:
            raise ValueError("LINE channel access token is not configured")

        self._channel_secret = channel_secret
        self._channel_access_token = channel_access_token
        self._endpoint_base = endpoint_base.rstrip("/")
        self._endpoint_base_data = endpoint_base_data.rstrip("/")
        self._transport: Transport = transport or HttpxTransport(http_client, timeout=timeout)

    @classmethod
    def from_config(
        cls, config: LineConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> LineBotClient:
        return cls(
            config.channel_secret,
            config.channel_access_token,
            endpoint_base=config.endpoint_base,
            endpoint_base_data=config.endpoint_base_data,
            timeout=config.timeout,
            http_client=http_client,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._channel_access_token}",
            "User-Agent": USER_AGENT,
        }

    def _post(self, path: str, envelope: Envelope) -> Call[BasicResponse]:
        headers = self._headers()
        headers["Content-Type"] = _JSON_CONTENT_TYPE
        return Call(
            method="POST",
            url=self._endpoint_base + path,
            decoder=decode_basic_response,
            transport=self._transport,
            headers=tuple(headers.items()),
            body=envelope.encode(),
        )

    def push_message(self, to: str, *messages: Message) -> Call[BasicResponse]:
        """Send messages to a user, group or room at any time."""
        return self._post(ENDPOINT_PUSH_MESSAGE, PushEnvelope(to=to, messages=messages))

    def reply_message(self, reply_token: str, *messages: Message) -> Call[BasicResponse]:
        """Answer a webhook event using its one-time reply token."""
        return self._post(
            ENDPOINT_REPLY_MESSAGE, ReplyEnvelope(reply_token=reply_token, messages=messages)
        )

    def get_profile(self, user_id: str) -> Call[UserProfileResponse]:
        path = ENDPOINT_GET_PROFILE.format(user_id=quote(user_id, safe=""))
        return Call(
            method="GET",
            url=self._endpoint_base + path,
            decoder=decode_user_profile_response,
            transport=self._transport,
            headers=tuple(self._headers().items()),
        )

    def get_message_content(self, message_id: str) -> Call[MessageContentResponse]:
        """Fetch the binary content of an image, video, audio or file message.

        The returned stream must be closed by the caller.
        """
        path = ENDPOINT_GET_MESSAGE_CONTENT.format(message_id=quote(message_id, safe=""))
        return Call(
            method="GET",
            url=self._endpoint_base_data + path,
            decoder=decode_message_content_response,
            transport=self._transport,
            headers=tuple(self._headers().items()),
        )

    def validate_signature(self, body: bytes, signature: Optional[str]) -> bool:
        """Check a webhook request's ``X-Line-Signature`` against the channel secret."""
        return validate_signature(self._channel_secret, body, signature)

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> LineBotClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
