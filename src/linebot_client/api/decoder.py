"""Turn raw HTTP responses into typed values or typed errors.

The status code alone picks the branch: 200 decodes the expected success
shape, anything else becomes an ``APIError``. On the error branch a body
that does not parse as ``ErrorResponse`` only costs detail (``response``
is ``None``); on the success branch a bad body is a ``DecodeError``.
"""

from __future__ import annotations

import re
from typing import Awaitable, Callable, Optional, TypeVar
from urllib.parse import unquote

import httpx
from pydantic import BaseModel, ValidationError

from linebot_client.api.errors import APIError, DecodeError
from linebot_client.api.responses import (
    BasicResponse,
    ErrorResponse,
    MessageContentResponse,
    UserProfileResponse,
)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)

Decoder = Callable[[httpx.Response], Awaitable[T]]

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_DISPOSITION = re.compile(rf"\s*(?P<type>{_TOKEN})\s*")
_PARAM = re.compile(
    rf';\s*(?P<key>{_TOKEN})\s*=\s*(?:(?P<token>{_TOKEN})|"(?P<quoted>(?:[^"\\]|\\.)*)")\s*'
)
_QUOTED_PAIR = re.compile(r"\\(.)")


async def _read_and_close(response: httpx.Response) -> bytes:
    try:
        return await response.aread()
    finally:
        await response.aclose()


def _validate(model: type[ModelT], body: bytes) -> ModelT:
    # A JSON null body decodes to the empty value, as an absent object would.
    if body.strip() == b"null":
        return model()
    return model.model_validate_json(body)


def _parse_error_body(body: bytes) -> Optional[ErrorResponse]:
    try:
        return _validate(ErrorResponse, body)
    except ValidationError:
        return None


async def raise_for_api_error(response: httpx.Response) -> None:
    """Raise ``APIError`` for any non-200 response, consuming its body."""
    if response.status_code == httpx.codes.OK:
        return
    body = await _read_and_close(response)
    raise APIError(response.status_code, _parse_error_body(body))


async def _decode_model(response: httpx.Response, model: type[ModelT]) -> ModelT:
    await raise_for_api_error(response)
    body = await _read_and_close(response)
    try:
        return _validate(model, body)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected {model.__name__} body: {exc.error_count()} error(s)") from exc


async def decode_basic_response(response: httpx.Response) -> BasicResponse:
    return await _decode_model(response, BasicResponse)


async def decode_user_profile_response(response: httpx.Response) -> UserProfileResponse:
    return await _decode_model(response, UserProfileResponse)


def _unquote(quoted: str) -> str:
    return _QUOTED_PAIR.sub(r"\1", quoted)


def _decode_extended(value: str) -> str:
    """Decode an RFC 2231 ``charset'language'percent-encoded`` value."""
    try:
        charset, _, encoded = value.split("'", 2)
        return unquote(encoded, encoding=charset or "utf-8", errors="strict")
    except (ValueError, LookupError) as exc:
        raise DecodeError(f"Malformed extended parameter value: {value!r}") from exc


def parse_content_disposition(value: Optional[str]) -> tuple[str, dict[str, str]]:
    """Split a ``Content-Disposition`` value into its type and parameters.

    Parameters must be ``;``-separated ``token=token`` or
    ``token="quoted string"`` pairs, each key at most once; a single trailing
    ``;`` is tolerated. ``key*`` parameters are RFC 2231 encoded and take
    precedence over the plain ``key``. Anything else raises ``DecodeError``.
    """
    if not value:
        raise DecodeError("Missing Content-Disposition header")

    head = _DISPOSITION.match(value)
    if head is None:
        raise DecodeError(f"Malformed Content-Disposition header: {value!r}")

    plain: dict[str, str] = {}
    extended: dict[str, str] = {}
    pos = head.end()
    while pos < len(value):
        match = _PARAM.match(value, pos)
        if match is None:
            if value[pos:].strip() == ";":
                break
            raise DecodeError(f"Malformed Content-Disposition parameters: {value!r}")
        key = match["key"].lower()
        if key in plain or key in extended:
            raise DecodeError(f"Duplicate Content-Disposition parameter {key!r}")
        if key.endswith("*"):
            if match["token"] is None:
                raise DecodeError(f"Quoted extended parameter {key!r}: {value!r}")
            extended[key] = _decode_extended(match["token"])
        elif match["token"] is not None:
            plain[key] = match["token"]
        else:
            plain[key] = _unquote(match["quoted"])
        pos = match.end()

    params = dict(plain)
    for key, decoded in extended.items():
        params[key[:-1]] = decoded
    return head["type"].lower(), params


async def decode_message_content_response(response: httpx.Response) -> MessageContentResponse:
    """Keep the body open and hand it to the caller with its file name."""
    await raise_for_api_error(response)
    try:
        _, params = parse_content_disposition(response.headers.get("Content-Disposition"))
    except DecodeError:
        await response.aclose()
        raise

    length = response.headers.get("Content-Length")
    return MessageContentResponse(
        response,
        file_name=params.get("filename", ""),
        content_type=response.headers.get("Content-Type", ""),
        content_length=int(length) if length and length.isdigit() else None,
    )
