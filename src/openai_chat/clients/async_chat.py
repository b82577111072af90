"""Async chat completion client."""

import logging

import httpx

from ..models.chat import ChatCompletionRequest, ChatCompletionResponse
from ..stream import AsyncChatCompletionStream
from ..utils import generate_request_id
from .base import BaseChatClient

logger = logging.getLogger(__name__)


class AsyncChatClient(BaseChatClient):
    """Chat completion client built on ``httpx.AsyncClient``."""

    def _create_http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100)
        )

    async def __aenter__(self) -> "AsyncChatClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        self.validate_request(request, streaming=False)

        request_id = generate_request_id()
        logger.info(f"[{request_id}] Chat completion request: model={request.model}, messages={len(request.messages)}")
        http_request = self.build_http_request(request, stream=False)

        response = await self.client.send(http_request)
        logger.debug(f"[{request_id}] HTTP response received: {response.status_code}")
        if not response.is_success:
            raise self.handle_error_response(response, request_id)
        return self.decode_response(response, request_id)

    async def create_chat_completion_stream(self, request: ChatCompletionRequest) -> AsyncChatCompletionStream:
        self.validate_request(request, streaming=True)

        request_id = generate_request_id()
        logger.info(f"[{request_id}] Chat completion stream request: model={request.model}, messages={len(request.messages)}")
        http_request = self.build_http_request(request, stream=True)

        response = await self.client.send(http_request, stream=True)
        logger.debug(f"[{request_id}] Streaming HTTP response status: {response.status_code}")
        if not response.is_success:
            try:
                await response.aread()
            finally:
                await response.aclose()
            raise self.handle_error_response(response, request_id)

        return AsyncChatCompletionStream(response, self.empty_messages_limit, request_id=request_id)
