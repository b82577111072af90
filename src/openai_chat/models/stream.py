"""Streaming chat completion event models."""

from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .chat import ChatMessage, ChatMessageRole, FinishReason, FunctionCall
from .serialization import OmitEmptyModel


class ChatCompletionStreamChoiceDelta(OmitEmptyModel):
    """Incremental fragment of a message."""
    omit_when_empty = ("content", "role", "function_call")

    content: str = Field(default="")
    # upstreams may introduce roles this client does not know yet
    role: Optional[Union[ChatMessageRole, str]] = Field(default=None, union_mode="left_to_right")
    function_call: Optional[FunctionCall] = Field(default=None)

    @field_validator("content", mode="before")
    @classmethod
    def null_content_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ChatCompletionStreamChoice(BaseModel):
    index: int
    delta: ChatCompletionStreamChoiceDelta = Field(default_factory=ChatCompletionStreamChoiceDelta)
    finish_reason: Optional[FinishReason] = None


class ChatCompletionStreamResponse(BaseModel):
    """A single ``chat.completion.chunk`` event."""
    id: str
    object: str = "chat.completion.chunk"
    created: int
    model: str
    choices: List[ChatCompletionStreamChoice] = Field(default_factory=list)


def accumulate_deltas(events: Iterable[ChatCompletionStreamResponse]) -> Dict[int, ChatMessage]:
    """Fold streamed deltas into one complete message per choice index.

    Content and function-call arguments are concatenated in arrival order;
    role and function name keep the first value seen.
    """
    roles: Dict[int, Union[ChatMessageRole, str]] = {}
    contents: Dict[int, List[str]] = {}
    names: Dict[int, str] = {}
    arguments: Dict[int, List[str]] = {}

    for event in events:
        for choice in event.choices:
            index = choice.index
            delta = choice.delta
            contents.setdefault(index, [])
            if delta.role is not None and index not in roles:
                roles[index] = delta.role
            if delta.content:
                contents[index].append(delta.content)
            if delta.function_call is not None:
                if delta.function_call.name and index not in names:
                    names[index] = delta.function_call.name
                if delta.function_call.arguments:
                    arguments.setdefault(index, []).append(delta.function_call.arguments)

    messages = {}
    for index in sorted(contents):
        function_call = None
        if index in names or index in arguments:
            function_call = FunctionCall(
                name=names.get(index, ""),
                arguments="".join(arguments.get(index, [])),
            )
        messages[index] = ChatMessage(
            role=roles.get(index, ChatMessageRole.ASSISTANT),
            content="".join(contents[index]),
            function_call=function_call,
        )
    return messages
