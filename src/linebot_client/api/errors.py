"""Error types raised by calls.

Network failures are not wrapped: ``httpx.TransportError`` and its
subclasses reach the caller as raised by httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from linebot_client.api.responses import ErrorResponse


class LineBotError(Exception):
    """Base class for errors raised by this library."""


class APIError(LineBotError):
    """The platform answered with a non-200 status.

    ``response`` holds the parsed error body, or ``None`` when the body
    could not be decoded and only the status code is known.
    """

    def __init__(self, code: int, response: Optional[ErrorResponse] = None):
        self.code = code
        self.response = response
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.response is None or not self.response.message:
            return f"APIError {self.code}"
        return f"APIError {self.code} {self.response.message}"

    def __repr__(self) -> str:
        return f"APIError(code={self.code!r}, response={self.response!r})"


class DecodeError(LineBotError):
    """A 200 response whose body or headers do not have the expected shape."""


class ContextError(LineBotError):
    """The call context ended before the round trip completed."""


class Cancelled(ContextError):
    def __init__(self) -> None:
        super().__init__("call context cancelled")


class DeadlineExceeded(ContextError, TimeoutError):
    def __init__(self) -> None:
        super().__init__("call context deadline exceeded")
