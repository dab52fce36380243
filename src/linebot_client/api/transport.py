"""HTTP transport used by calls."""

from __future__ import annotations

from typing import Optional, Protocol

import httpx


class Transport(Protocol):
    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Optional[bytes] = None,
    ) -> httpx.Response:
        """Perform one request and return the response with its body unread.

        Raises ``httpx.TransportError`` on network failure.
        """
        ...


class HttpxTransport:
    """Transport backed by an ``httpx.AsyncClient``.

    Responses are streamed: the caller reads and closes the body.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Optional[bytes] = None,
    ) -> httpx.Response:
        request = self._client.build_request(method, url, headers=headers, content=body)
        return await self._client.send(request, stream=True)

    async def aclose(self) -> None:
        # A caller-supplied client stays open; its owner closes it.
        if self._owns_client:
            await self._client.aclose()
