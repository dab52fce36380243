"""Deferred, reusable API calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Generic, Optional, TypeVar

from linebot_client.api.context import CallContext
from linebot_client.api.decoder import Decoder
from linebot_client.api.transport import Transport
from linebot_client.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Call(Generic[T]):
    """One pending request: building it does no I/O, ``execute()`` sends it.

    A Call is immutable and may be executed any number of times; each
    execution is an independent round trip with its own result.
    """

    method: str
    url: str
    decoder: Decoder[T] = field(repr=False)
    transport: Transport = field(repr=False)
    headers: tuple[tuple[str, str], ...] = field(default=(), repr=False)
    body: Optional[bytes] = field(default=None, repr=False)
    context: Optional[CallContext] = field(default=None, repr=False)

    def with_context(self, context: CallContext) -> Call[T]:
        """Return a copy of this call bound to ``context``."""
        return replace(self, context=context)

    async def execute(self) -> T:
        """Send the request and decode the response.

        Raises ``APIError`` for non-200 responses, ``DecodeError`` for
        unexpected success bodies, ``httpx.TransportError`` for network
        failures, and the context's ``Cancelled`` or ``DeadlineExceeded``
        if the context ends first.
        """
        if self.context is None:
            return await self._round_trip()

        err = self.context.err
        if err is not None:
            raise type(err)() from None

        round_trip = asyncio.ensure_future(self._round_trip())
        context_done = asyncio.ensure_future(self.context.wait())
        try:
            done, _ = await asyncio.wait(
                {round_trip, context_done}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            context_done.cancel()
            if not round_trip.done():
                round_trip.cancel()
                # Wait for the transport to unwind so the connection is released.
                await asyncio.gather(round_trip, return_exceptions=True)

        if round_trip in done:
            return round_trip.result()

        err = self.context.err
        assert err is not None
        logger.debug("call_cancelled", method=self.method, url=self.url, reason=str(err))
        # Each call gets its own instance; the context keeps the original.
        raise type(err)() from None

    async def _round_trip(self) -> T:
        logger.debug("api_request", method=self.method, url=self.url, body_size=len(self.body or b""))
        response = await self.transport.send(self.method, self.url, dict(self.headers), self.body)
        logger.debug("api_response", method=self.method, url=self.url, status=response.status_code)
        try:
            return await self.decoder(response)
        except BaseException:
            # e.g. cancelled mid-decode
            if not response.is_closed:
                await response.aclose()
            raise
