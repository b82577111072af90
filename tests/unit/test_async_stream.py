"""
Unit tests for the async stream reader.
"""

import httpx
import pytest

from openai_chat.errors import (
    StreamDecodeError,
    StreamDone,
    StreamReadError,
    TooManyEmptyStreamMessagesError,
)
from openai_chat.stream import AsyncChatCompletionStream


@pytest.mark.asyncio
async def test_async_events_until_done(async_stream_response, sse_line, chunk):
    stream = AsyncChatCompletionStream(async_stream_response([
        sse_line(chunk(role="assistant")),
        b": keep-alive\n",
        sse_line(chunk(content="Hi")),
        b"data: [DONE]\n\n",
    ]))

    assert (await stream.recv()).choices[0].delta.role == "assistant"
    assert (await stream.recv()).choices[0].delta.content == "Hi"
    with pytest.raises(StreamDone):
        await stream.recv()
    with pytest.raises(StreamDone):
        await stream.recv()
    assert stream.closed
    assert stream.response.is_closed


@pytest.mark.asyncio
async def test_async_iteration(async_stream_response, sse_line, chunk):
    stream = AsyncChatCompletionStream(async_stream_response([
        sse_line(chunk(content="a")),
        sse_line(chunk(content="b")),
    ]))

    contents = [event.choices[0].delta.content async for event in stream]
    assert contents == ["a", "b"]


@pytest.mark.asyncio
async def test_async_empty_limit(async_stream_response, sse_line, chunk):
    ok = AsyncChatCompletionStream(async_stream_response([b"\n" * 2, sse_line(chunk(content="x"))]), empty_messages_limit=2)
    assert (await ok.recv()).choices[0].delta.content == "x"

    broken = AsyncChatCompletionStream(async_stream_response([b"\n" * 3, sse_line(chunk(content="x"))]), empty_messages_limit=2)
    with pytest.raises(TooManyEmptyStreamMessagesError):
        await broken.recv()


@pytest.mark.asyncio
async def test_async_decode_error_keeps_raw_bytes(async_stream_response):
    stream = AsyncChatCompletionStream(async_stream_response([b"data: {oops}\n"]))

    with pytest.raises(StreamDecodeError) as exc_info:
        await stream.recv()
    assert exc_info.value.raw == b"{oops}"


@pytest.mark.asyncio
async def test_async_truncated_body(async_stream_response):
    stream = AsyncChatCompletionStream(async_stream_response([httpx.RemoteProtocolError("incomplete chunked read")]))

    with pytest.raises(StreamReadError):
        await stream.recv()
    assert stream.closed


@pytest.mark.asyncio
async def test_async_context_manager(async_stream_response, sse_line, chunk):
    async with AsyncChatCompletionStream(async_stream_response([sse_line(chunk(content="x"))])) as stream:
        await stream.recv()
    assert stream.closed
    await stream.aclose()
