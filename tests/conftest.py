"""Shared fixtures for linebot-client tests."""

from typing import Awaitable, Callable, Union

import httpx
import pytest

from linebot_client.client import LineBotClient

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]

CHANNEL_SECRET = "testsecret"
CHANNEL_TOKEN = "testtoken"


@pytest.fixture
def make_client():
    """Factory for clients whose requests are answered by ``handler``."""

    def _make(handler: Handler) -> LineBotClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return LineBotClient(
            CHANNEL_SECRET,
            CHANNEL_TOKEN,
            endpoint_base="https://api.example.test",
            endpoint_base_data="https://api-data.example.test",
            http_client=http_client,
        )

    return _make
