"""Chat completion clients."""

from .base import BaseChatClient, RequestBuilder
from .chat import ChatClient
from .async_chat import AsyncChatClient

__all__ = ["BaseChatClient", "RequestBuilder", "ChatClient", "AsyncChatClient"]
