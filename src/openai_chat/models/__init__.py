"""Data models for the chat completion client."""

from .chat import *
from .stream import *
from .serialization import OmitEmptyModel

__all__ = [
    # Request models
    "ChatMessageRole",
    "FunctionCall",
    "ChatMessage",
    "JSONSchemaType",
    "JSONSchema",
    "FunctionParameters",
    "FunctionDefinition",
    "ChatCompletionRequest",

    # Response models
    "FinishReason",
    "Usage",
    "ChatCompletionChoice",
    "ChatCompletionResponse",

    # Streaming models
    "ChatCompletionStreamChoiceDelta",
    "ChatCompletionStreamChoice",
    "ChatCompletionStreamResponse",
    "accumulate_deltas",

    "OmitEmptyModel",
]
