"""Incremental readers for server-sent-event chat completion streams.

Both readers share :class:`StreamDecoder`, which owns the line buffer, the
empty-message counter and the decode step. The readers only differ in how
they pull bytes off the connection and how they release it.

Outcomes of ``recv()``:

- an event of type ``T`` is returned; the caller may call ``recv()`` again
- :class:`StreamDone` is raised on ``data: [DONE]`` or a clean end of body
- a :class:`StreamError` subclass is raised when the stream broke

Terminal outcomes close the response and are sticky: later calls raise the
same outcome again without touching the connection.
"""

import logging
from typing import AsyncIterator, Generic, Iterator, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .accumulator import ErrorAccumulator
from .errors import (
    StreamDecodeError,
    StreamDone,
    StreamError,
    StreamReadError,
    TooManyEmptyStreamMessagesError,
)
from .models.stream import ChatCompletionStreamResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DATA_PREFIX = b"data: "
DONE_SENTINEL = b"[DONE]"
DEFAULT_EMPTY_MESSAGES_LIMIT = 300


class StreamDecoder(Generic[T]):
    """Line framing and event decoding, independent of any I/O."""

    def __init__(
        self,
        event_type: Type[T],
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        accumulator: Optional[ErrorAccumulator] = None,
    ):
        self.event_type = event_type
        self.empty_messages_limit = empty_messages_limit
        self.accumulator = accumulator or ErrorAccumulator()
        self.empty_messages = 0
        self._pending = bytearray()
        self._lines: List[bytes] = []

    def feed(self, chunk: bytes) -> None:
        """Append raw bytes read from the connection."""
        self._pending.extend(chunk)
        while True:
            end = self._pending.find(b"\n")
            if end < 0:
                break
            self._lines.append(bytes(self._pending[: end + 1]))
            del self._pending[: end + 1]

    def next_line(self) -> Optional[bytes]:
        """Pop the next complete line, or None if more bytes are needed."""
        if self._lines:
            return self._lines.pop(0)
        return None

    def flush(self) -> Optional[bytes]:
        """Return a trailing line left without a newline at end of body."""
        if not self._pending:
            return None
        line = bytes(self._pending)
        self._pending.clear()
        return line

    def decode_line(self, line: bytes) -> Optional[T]:
        """Turn one line into an event.

        Returns None when the line produced nothing and the caller should
        keep reading. Raises StreamDone or a StreamError on terminal lines.
        """
        line = line.rstrip(b"\r\n")
        if not line:
            self.empty_messages += 1
            if self.empty_messages > self.empty_messages_limit:
                raise TooManyEmptyStreamMessagesError(self.empty_messages_limit)
            return None

        if not line.startswith(DATA_PREFIX):
            # comments, event names and other metadata are skipped
            logger.debug(f"Skipping non-data stream line: {line[:80]!r}")
            return None

        payload = line[len(DATA_PREFIX):]
        if payload == DONE_SENTINEL:
            raise StreamDone()

        try:
            event = self.event_type.model_validate_json(payload)
        except ValidationError as e:
            self.accumulator.write(payload)
            raise StreamDecodeError(
                f"failed to decode stream event as {self.event_type.__name__}: {e}",
                self.accumulator.bytes(),
            ) from e

        # only a decoded event ends a run of empty lines
        self.empty_messages = 0
        return event


class _BaseStreamReader(Generic[T]):
    def __init__(
        self,
        response: httpx.Response,
        event_type: Type[T],
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        request_id: Optional[str] = None,
    ):
        self.response = response
        self.request_id = request_id
        self._decoder: StreamDecoder[T] = StreamDecoder(event_type, empty_messages_limit)
        self._outcome: Optional[Exception] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def empty_messages_limit(self) -> int:
        return self._decoder.empty_messages_limit

    def _check_terminal(self) -> None:
        if isinstance(self._outcome, StreamError):
            raise self._outcome
        if self._outcome is not None or self._closed:
            raise StreamDone()

    def _record_outcome(self, outcome: Exception) -> None:
        self._outcome = outcome
        if isinstance(outcome, StreamDone):
            logger.debug(f"[{self.request_id}] Stream finished")
        else:
            logger.warning(f"[{self.request_id}] Stream failed: {outcome}")

    def _read_error(self, e: httpx.HTTPError) -> StreamReadError:
        return StreamReadError(f"failed to read stream: {e!r}")


class StreamReader(_BaseStreamReader[T]):
    """Blocking reader over a streamed ``httpx.Response``.

    Not safe for concurrent use; one consumer pulls events in order.
    """

    def __init__(
        self,
        response: httpx.Response,
        event_type: Type[T],
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        request_id: Optional[str] = None,
    ):
        super().__init__(response, event_type, empty_messages_limit, request_id)
        self._chunks = response.iter_bytes()

    def recv(self) -> T:
        self._check_terminal()
        try:
            while True:
                event = self._decoder.decode_line(self._read_line())
                if event is not None:
                    return event
        except (StreamDone, StreamError) as e:
            self._record_outcome(e)
            self.close()
            raise

    def _read_line(self) -> bytes:
        while True:
            line = self._decoder.next_line()
            if line is not None:
                return line
            try:
                chunk = next(self._chunks)
            except StopIteration:
                line = self._decoder.flush()
                if line is None:
                    raise StreamDone()
                return line
            except httpx.HTTPError as e:
                raise self._read_error(e) from e
            self._decoder.feed(chunk)

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.response.close()

    def __enter__(self) -> "StreamReader[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        try:
            return self.recv()
        except StreamDone:
            raise StopIteration


class AsyncStreamReader(_BaseStreamReader[T]):
    """Async counterpart of :class:`StreamReader`."""

    def __init__(
        self,
        response: httpx.Response,
        event_type: Type[T],
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        request_id: Optional[str] = None,
    ):
        super().__init__(response, event_type, empty_messages_limit, request_id)
        self._chunks = response.aiter_bytes()

    async def recv(self) -> T:
        self._check_terminal()
        try:
            while True:
                event = self._decoder.decode_line(await self._read_line())
                if event is not None:
                    return event
        except (StreamDone, StreamError) as e:
            self._record_outcome(e)
            await self.aclose()
            raise

    async def _read_line(self) -> bytes:
        while True:
            line = self._decoder.next_line()
            if line is not None:
                return line
            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                line = self._decoder.flush()
                if line is None:
                    raise StreamDone()
                return line
            except httpx.HTTPError as e:
                raise self._read_error(e) from e
            self._decoder.feed(chunk)

    async def aclose(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self.response.aclose()

    async def __aenter__(self) -> "AsyncStreamReader[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.recv()
        except StreamDone:
            raise StopAsyncIteration


class ChatCompletionStream(StreamReader[ChatCompletionStreamResponse]):
    """Stream of ``chat.completion.chunk`` events."""

    def __init__(
        self,
        response: httpx.Response,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        request_id: Optional[str] = None,
    ):
        super().__init__(response, ChatCompletionStreamResponse, empty_messages_limit, request_id)


class AsyncChatCompletionStream(AsyncStreamReader[ChatCompletionStreamResponse]):
    """Async stream of ``chat.completion.chunk`` events."""

    def __init__(
        self,
        response: httpx.Response,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        request_id: Optional[str] = None,
    ):
        super().__init__(response, ChatCompletionStreamResponse, empty_messages_limit, request_id)
