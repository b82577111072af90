"""Exception hierarchy for the chat completion client."""

import json
from typing import Any, Optional

from .utils import classify_error


class OpenAIChatError(Exception):
    """Base class for every error raised by this package."""


class RequestValidationError(OpenAIChatError):
    """A request was rejected before any network I/O."""


class ChatCompletionStreamNotSupportedError(RequestValidationError):
    def __init__(self) -> None:
        super().__init__(
            "streaming is not supported with this method, please use create_chat_completion_stream"
        )


class ModelNotSupportedWithPluginsError(RequestValidationError):
    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__(f"this model is not supported with plugins: {model}")


class ChatCompletionInvalidModelError(RequestValidationError):
    def __init__(self, model: str, endpoint: str) -> None:
        self.model = model
        self.endpoint = endpoint
        super().__init__(
            f"this model is not supported with this method: {model} cannot be used with {endpoint}"
        )


class APIError(OpenAIChatError):
    """Structured error returned by the API with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Any = None,
        param: Optional[str] = None,
        type: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        self.param = param
        self.type = type
        super().__init__(f"error, status code: {status_code}, message: {message}")


class RequestError(OpenAIChatError):
    """Non-2xx response whose body could not be parsed as an API error."""

    def __init__(self, status_code: int, body: bytes = b"") -> None:
        self.status_code = status_code
        self.body = body
        self.message = classify_error(body.decode("utf-8", errors="replace"), status_code)
        super().__init__(f"error, status code: {status_code}, message: {self.message}")


class ResponseDecodeError(OpenAIChatError):
    """A 2xx response body did not match the expected schema."""

    def __init__(self, message: str, body: bytes) -> None:
        self.body = body
        super().__init__(message)


def error_from_response(status_code: int, body: bytes) -> OpenAIChatError:
    """Build the error for a failed response from its status and raw body."""
    try:
        payload = json.loads(body)
        error = payload["error"]
        message = error["message"]
    except (ValueError, TypeError, KeyError):
        return RequestError(status_code, body)
    if not isinstance(error, dict) or not isinstance(message, str):
        return RequestError(status_code, body)
    return APIError(
        status_code=status_code,
        message=message,
        code=error.get("code"),
        param=error.get("param"),
        type=error.get("type"),
    )


class StreamDone(Exception):
    """The stream ended normally, via the [DONE] sentinel or a clean close."""


class StreamError(OpenAIChatError):
    """A stream ended abnormally."""


class StreamReadError(StreamError):
    """Reading from the connection failed; the transport error is chained."""


class StreamDecodeError(StreamError):
    """An event payload could not be decoded."""

    def __init__(self, message: str, raw: bytes) -> None:
        self.raw = raw
        super().__init__(message)


class TooManyEmptyStreamMessagesError(StreamError):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"stream has sent too many empty messages (limit {limit})")
