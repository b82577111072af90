"""
openai_chat: chat completion client with a streaming server-sent-events reader.
"""

__version__ = "0.1.0"

from .accumulator import ErrorAccumulator
from .clients import AsyncChatClient, ChatClient, RequestBuilder
from .config import Settings, get_settings
from .errors import (
    APIError,
    ChatCompletionInvalidModelError,
    ChatCompletionStreamNotSupportedError,
    ModelNotSupportedWithPluginsError,
    OpenAIChatError,
    RequestError,
    RequestValidationError,
    ResponseDecodeError,
    StreamDecodeError,
    StreamDone,
    StreamError,
    StreamReadError,
    TooManyEmptyStreamMessagesError,
)
from .models import *
from .registry import DEFAULT_REGISTRY, ModelRegistry
from .stream import (
    AsyncChatCompletionStream,
    AsyncStreamReader,
    ChatCompletionStream,
    StreamDecoder,
    StreamReader,
)
