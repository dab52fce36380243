"""Tests for response decoding."""

import httpx
import pytest

from linebot_client.api.decoder import (
    decode_basic_response,
    decode_message_content_response,
    decode_user_profile_response,
    parse_content_disposition,
)
from linebot_client.api.errors import APIError, DecodeError
from linebot_client.api.responses import BasicResponse, ErrorResponse, UserProfileResponse


class ChunkStream(httpx.AsyncByteStream):
    """Unread response body that records whether it was closed."""

    def __init__(self, *chunks: bytes):
        self.chunks = chunks
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


def streamed(status: int, *chunks: bytes, headers=None) -> tuple[httpx.Response, ChunkStream]:
    stream = ChunkStream(*chunks)
    return httpx.Response(status, headers=headers, stream=stream), stream


@pytest.mark.asyncio
async def test_basic_response_from_empty_object():
    """Test 200 with {} decodes to an empty BasicResponse."""
    res = await decode_basic_response(httpx.Response(200, content=b"{}"))
    assert res == BasicResponse(request_id="")


@pytest.mark.asyncio
async def test_basic_response_ignores_unknown_keys():
    """Test extra keys in a success body are ignored."""
    res = await decode_basic_response(
        httpx.Response(200, content=b'{"requestId":"abc","sentMessages":[]}')
    )
    assert res.request_id == "abc"


@pytest.mark.asyncio
async def test_success_body_closed_after_decode():
    """Test the JSON body is fully consumed and closed."""
    response, stream = streamed(200, b'{"request', b'Id":"r1"}')
    res = await decode_basic_response(response)
    assert res.request_id == "r1"
    assert stream.closed


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"", b"not json", b"[]", b'{"requestId": 5}'])
async def test_bad_success_body_is_decode_error(body):
    """Test a 200 with an unexpected body raises DecodeError, not APIError."""
    with pytest.raises(DecodeError) as exc_info:
        await decode_basic_response(httpx.Response(200, content=body))
    assert not isinstance(exc_info.value, APIError)
    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_structured_error_body():
    """Test a 400 with an ErrorResponse body keeps message and detail order."""
    body = (
        b'{"requestId":"req-1","message":"Invalid","details":['
        b'{"message":"b","property":"p2"},{"message":"a","property":"p1"}]}'
    )
    with pytest.raises(APIError) as exc_info:
        await decode_basic_response(httpx.Response(400, content=body))

    err = exc_info.value
    assert err.code == 400
    assert isinstance(err.response, ErrorResponse)
    assert err.response.request_id == "req-1"
    assert [(d.property, d.message) for d in err.response.details] == [("p2", "b"), ("p1", "a")]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"<html>Bad Gateway</html>", b"", b'"just a string"'])
async def test_malformed_error_body_keeps_status_only(body):
    """Test a non-200 with an undecodable body raises APIError without a response."""
    response, stream = streamed(502, body)
    with pytest.raises(APIError) as exc_info:
        await decode_basic_response(response)

    assert exc_info.value.code == 502
    assert exc_info.value.response is None
    assert str(exc_info.value) == "APIError 502"
    assert stream.closed


@pytest.mark.asyncio
async def test_empty_error_object_is_structured():
    """Test {} on the error path is a structured but empty ErrorResponse."""
    with pytest.raises(APIError) as exc_info:
        await decode_basic_response(httpx.Response(401, content=b"{}"))
    assert exc_info.value.response == ErrorResponse()


@pytest.mark.asyncio
async def test_null_details_decode_as_empty():
    """Test a null details list decodes to an empty tuple."""
    with pytest.raises(APIError) as exc_info:
        await decode_basic_response(
            httpx.Response(400, content=b'{"message":"Bad","details":null}')
        )
    assert exc_info.value.response.details == ()


@pytest.mark.asyncio
async def test_null_error_body_is_empty_error_response():
    """Test a JSON null error body decodes like an empty object."""
    response, stream = streamed(400, b"null")
    with pytest.raises(APIError) as exc_info:
        await decode_basic_response(response)
    assert exc_info.value.response == ErrorResponse()
    assert str(exc_info.value) == "APIError 400"
    assert stream.closed


@pytest.mark.asyncio
async def test_null_success_body_is_empty_response():
    """Test a JSON null success body decodes to the empty BasicResponse."""
    res = await decode_basic_response(httpx.Response(200, content=b"null"))
    assert res == BasicResponse()


@pytest.mark.asyncio
async def test_user_profile_response():
    """Test profile fields map from camelCase keys."""
    body = (
        b'{"userId":"U1","displayName":"Brown","pictureUrl":"https://example.com/p.png",'
        b'"statusMessage":"hello"}'
    )
    profile = await decode_user_profile_response(httpx.Response(200, content=body))

    assert profile == UserProfileResponse(
        user_id="U1",
        display_name="Brown",
        picture_url="https://example.com/p.png",
        status_message="hello",
    )


@pytest.mark.asyncio
async def test_decoded_values_are_frozen():
    """Test decoded responses cannot be mutated."""
    res = await decode_basic_response(httpx.Response(200, content=b'{"requestId":"x"}'))
    with pytest.raises(Exception):
        res.request_id = "y"  # type: ignore[misc]


@pytest.mark.asyncio
async def test_content_response_hands_over_open_stream():
    """Test content responses expose the file name and leave the stream open."""
    response, stream = streamed(
        200,
        b"\x89PNG",
        b"\r\n",
        headers={
            "Content-Disposition": "attachment; filename=foo.png",
            "Content-Type": "image/png",
            "Content-Length": "6",
        },
    )
    content = await decode_message_content_response(response)

    assert content.file_name == "foo.png"
    assert content.content_type == "image/png"
    assert content.content_length == 6
    assert not content.is_closed
    assert not stream.closed

    assert await content.read() == b"\x89PNG\r\n"
    assert stream.closed


@pytest.mark.asyncio
async def test_content_response_context_manager_closes():
    """Test leaving the async context closes the stream."""
    response, stream = streamed(
        200, b"abc", headers={"Content-Disposition": 'attachment; filename="a b.jpg"'}
    )
    async with await decode_message_content_response(response) as content:
        chunks = [chunk async for chunk in content.aiter_bytes()]
        assert content.file_name == "a b.jpg"
    assert b"".join(chunks) == b"abc"
    assert stream.closed


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "; filename=foo.png",
        "att@chment; filename=x",
        "attachment; filename",
        "attachment; filename=foo bar",
        "attachment; =foo",
        "attachment;; filename=foo.png",
        'attachment; filename="unterminated',
        "attachment; filename=a.png; filename=b.png",
        "attachment; filename*=no-quotes",
        "attachment; filename*=\"UTF-8''a.png\"",
    ],
)
async def test_content_without_usable_disposition(header):
    """Test a missing or malformed Content-Disposition is a DecodeError and closes the stream."""
    headers = {"Content-Disposition": header} if header is not None else {}
    response, stream = streamed(200, b"data", headers=headers)

    with pytest.raises(DecodeError):
        await decode_message_content_response(response)
    assert stream.closed


@pytest.mark.asyncio
async def test_content_error_status_is_api_error():
    """Test content endpoints use the same error branch."""
    response, stream = streamed(404, b'{"message":"Not found"}')
    with pytest.raises(APIError) as exc_info:
        await decode_message_content_response(response)
    assert exc_info.value.code == 404
    assert exc_info.value.response.message == "Not found"
    assert stream.closed


def test_parse_content_disposition_params():
    """Test disposition type and parameters are extracted."""
    disposition, params = parse_content_disposition(
        "Attachment; filename=foo.png; size=10"
    )
    assert disposition == "attachment"
    assert params == {"filename": "foo.png", "size": "10"}


def test_parse_content_disposition_rfc2231_filename():
    """Test encoded file names are decoded."""
    _, params = parse_content_disposition("attachment; filename*=UTF-8''%E5%86%99%E7%9C%9F.jpg")
    assert params["filename"] == "写真.jpg"


def test_parse_content_disposition_without_filename():
    """Test a disposition without filename is valid but has no name."""
    disposition, params = parse_content_disposition("inline")
    assert disposition == "inline"
    assert "filename" not in params


def test_parse_content_disposition_quoted_pair_and_trailing_semicolon():
    """Test backslash escapes are unquoted and one trailing ';' is accepted."""
    disposition, params = parse_content_disposition('attachment; filename="say \\"hi\\".png";')
    assert disposition == "attachment"
    assert params == {"filename": 'say "hi".png'}


def test_parse_content_disposition_extended_wins_over_plain():
    """Test filename* replaces the plain filename fallback."""
    _, params = parse_content_disposition(
        "attachment; filename=fallback.jpg; filename*=UTF-8''%C3%A9t%C3%A9.jpg"
    )
    assert params == {"filename": "été.jpg"}
