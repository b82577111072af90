"""Blocking chat completion client."""

import logging

import httpx

from ..models.chat import ChatCompletionRequest, ChatCompletionResponse
from ..stream import ChatCompletionStream
from ..utils import generate_request_id
from .base import BaseChatClient

logger = logging.getLogger(__name__)


class ChatClient(BaseChatClient):
    """Chat completion client built on ``httpx.Client``."""

    def _create_http_client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100)
        )

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Create a completion for the chat messages in one round trip."""
        self.validate_request(request, streaming=False)

        request_id = generate_request_id()
        logger.info(f"[{request_id}] Chat completion request: model={request.model}, messages={len(request.messages)}")
        http_request = self.build_http_request(request, stream=False)
        logger.debug(f"[{request_id}] Request URL: {http_request.url}")

        response = self.client.send(http_request)
        logger.debug(f"[{request_id}] HTTP response received: {response.status_code}")
        if not response.is_success:
            raise self.handle_error_response(response, request_id)
        return self.decode_response(response, request_id)

    def create_chat_completion_stream(self, request: ChatCompletionRequest) -> ChatCompletionStream:
        """Create a chat completion streamed back as server-sent events.

        The request is always sent with ``stream`` enabled. The returned
        stream owns the open connection; close it or use it as a context
        manager.
        """
        self.validate_request(request, streaming=True)

        request_id = generate_request_id()
        logger.info(f"[{request_id}] Chat completion stream request: model={request.model}, messages={len(request.messages)}")
        http_request = self.build_http_request(request, stream=True)

        response = self.client.send(http_request, stream=True)
        logger.debug(f"[{request_id}] Streaming HTTP response status: {response.status_code}")
        if not response.is_success:
            try:
                response.read()
            finally:
                response.close()
            raise self.handle_error_response(response, request_id)

        return ChatCompletionStream(response, self.empty_messages_limit, request_id=request_id)
