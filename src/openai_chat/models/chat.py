"""Chat completion request and response models."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, field_validator

from .serialization import OmitEmptyModel

M = TypeVar("M", bound=BaseModel)


class ChatMessageRole(str, Enum):
    """Roles a chat message can be sent under."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


class FinishReason(str, Enum):
    """Why the model stopped generating a choice.

    stop: complete message, or one terminated by a stop sequence
    length: output cut off by max_tokens or the context limit
    function_call: the model decided to call a function
    content_filter: content omitted by the provider's filters
    null: the literal "null" string some upstreams send; a choice still in
          progress normally arrives with a JSON null, decoded as None
    """
    STOP = "stop"
    LENGTH = "length"
    FUNCTION_CALL = "function_call"
    CONTENT_FILTER = "content_filter"
    NULL = "null"


class FunctionCall(OmitEmptyModel):
    """A function invocation requested by the model.

    ``arguments`` is kept exactly as sent by the API. It is often partial
    while streaming, so decoding is left to the caller.
    """
    omit_when_empty = ("name", "arguments")

    name: str = Field(default="", description="Function name")
    arguments: str = Field(default="", description="JSON-encoded arguments")

    @field_validator("name", "arguments", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def is_empty(self) -> bool:
        return not self.name and not self.arguments

    def decode_arguments(self, model: Optional[Type[M]] = None) -> Union[Any, M]:
        """Decode ``arguments`` as JSON, optionally into a pydantic model."""
        if model is not None:
            return model.model_validate_json(self.arguments)
        return json.loads(self.arguments)


class ChatMessage(OmitEmptyModel):
    """A single message in a chat conversation."""
    omit_when_empty = ("function_call", "name")

    # roles outside ChatMessageRole are kept as plain strings
    role: Union[ChatMessageRole, str] = Field(
        ..., union_mode="left_to_right", description="Message role: system, user, assistant, function"
    )
    content: str = Field(default="", description="Message content")
    function_call: Optional[FunctionCall] = Field(default=None)
    # Not in the official API reference, but accepted by the endpoint
    name: Optional[str] = Field(default=None, description="Author name")

    @field_validator("content", mode="before")
    @classmethod
    def null_content_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class JSONSchemaType(str, Enum):
    OBJECT = "object"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"


class JSONSchema(BaseModel):
    """Subset of JSON Schema used to describe function parameters."""
    type: Optional[JSONSchemaType] = None
    description: Optional[str] = None
    enum: Optional[List[str]] = None
    properties: Optional[Dict[str, "JSONSchema"]] = None
    required: Optional[List[str]] = None


class FunctionParameters(BaseModel):
    type: JSONSchemaType = JSONSchemaType.OBJECT
    properties: Dict[str, JSONSchema] = Field(default_factory=dict)
    required: Optional[List[str]] = None


class FunctionDefinition(BaseModel):
    """A function the model may choose to call."""
    name: str
    description: Optional[str] = None
    parameters: FunctionParameters = Field(default_factory=FunctionParameters)


class ChatCompletionRequest(BaseModel):
    """/v1/chat/completions request body."""
    model: str = Field(..., description="Model name")
    messages: List[ChatMessage] = Field(..., description="Conversation messages")
    max_tokens: Optional[int] = Field(default=None, ge=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    n: Optional[int] = Field(default=None, ge=1)
    stream: bool = Field(default=False)
    stop: Optional[List[str]] = Field(default=None)
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    logit_bias: Optional[Dict[str, int]] = Field(default=None)
    user: Optional[str] = Field(default=None)
    functions: Optional[List[FunctionDefinition]] = Field(default=None)

    def to_payload(self, stream: Optional[bool] = None) -> Dict[str, Any]:
        """Wire body with unset parameters left out.

        ``stream`` overrides the request's own flag without mutating it.
        """
        payload = self.model_dump(mode="json", exclude_none=True)
        if stream is not None:
            payload["stream"] = stream
        if not payload.get("stream"):
            payload.pop("stream", None)
        return payload


class Usage(BaseModel):
    """Token accounting for a completion."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionChoice(BaseModel):
    index: int
    message: ChatMessage
    finish_reason: Optional[FinishReason] = None


class ChatCompletionResponse(BaseModel):
    """/v1/chat/completions response body."""
    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: List[ChatCompletionChoice]
    usage: Usage = Field(default_factory=Usage)
