"""Decoded response values.

JSON bodies map onto frozen pydantic models. Missing keys fall back to
empty defaults and unknown keys are ignored, so ``{}`` is a valid
``BasicResponse``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BasicResponse(_WireModel):
    request_id: str = Field(default="", alias="requestId")


class UserProfileResponse(_WireModel):
    request_id: str = Field(default="", alias="requestId")
    user_id: str = Field(default="", alias="userId")
    display_name: str = Field(default="", alias="displayName")
    picture_url: str = Field(default="", alias="pictureUrl")
    status_message: str = Field(default="", alias="statusMessage")


class ErrorDetail(_WireModel):
    message: str = ""
    property: str = ""


class ErrorResponse(_WireModel):
    request_id: str = Field(default="", alias="requestId")
    message: str = ""
    details: tuple[ErrorDetail, ...] = ()

    @field_validator("details", mode="before")
    @classmethod
    def _null_details(cls, value: Any) -> Any:
        return () if value is None else value


@dataclass(frozen=True)
class MessageContentResponse:
    """Binary content with its attachment file name.

    The underlying HTTP stream is open and owned by the caller, who must
    close it with ``aclose()`` or by using the value as an async context
    manager.
    """

    _response: httpx.Response = field(repr=False, compare=False)
    file_name: str = ""
    content_type: str = ""
    content_length: Optional[int] = None

    def aiter_bytes(self, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes(chunk_size)

    async def read(self) -> bytes:
        """Read the remaining content into memory and close the stream."""
        try:
            return await self._response.aread()
        finally:
            await self._response.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()

    @property
    def is_closed(self) -> bool:
        return self._response.is_closed

    async def __aenter__(self) -> MessageContentResponse:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
