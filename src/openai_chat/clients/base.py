"""Base class for chat completion clients."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import (
    ChatCompletionInvalidModelError,
    ChatCompletionStreamNotSupportedError,
    ModelNotSupportedWithPluginsError,
    ResponseDecodeError,
    error_from_response,
)
from ..models.chat import ChatCompletionRequest, ChatCompletionResponse
from ..registry import CHAT_COMPLETIONS_ENDPOINT, DEFAULT_REGISTRY, ModelRegistry
from ..stream import DEFAULT_EMPTY_MESSAGES_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
USER_AGENT = "openai-chat-stream/0.1.0"


class RequestBuilder:
    """Builds authenticated HTTP requests against the API base URL."""

    def __init__(self, api_key: Optional[str], base_url: str = DEFAULT_BASE_URL, organization: Optional[str] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.organization = organization

    def full_url(self, suffix: str) -> str:
        return f"{self.base_url}{suffix}"

    def get_headers(self, stream: bool = False) -> Dict[str, str]:
        """Get HTTP headers for API requests."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        if stream:
            headers["Accept"] = "text/event-stream"
            headers["Cache-Control"] = "no-cache"
            headers["Connection"] = "keep-alive"
        return headers

    def build(
        self,
        client: Union[httpx.Client, httpx.AsyncClient],
        method: str,
        suffix: str,
        body: Dict[str, Any],
        stream: bool = False,
    ) -> httpx.Request:
        return client.build_request(
            method,
            self.full_url(suffix),
            json=body,
            headers=self.get_headers(stream=stream),
        )


class BaseChatClient(ABC):
    """Shared validation, request building and response handling."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        organization: Optional[str] = None,
        timeout: float = 90,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
        registry: ModelRegistry = DEFAULT_REGISTRY,
        request_builder: Optional[RequestBuilder] = None,
        client: Optional[Union[httpx.Client, httpx.AsyncClient]] = None,
    ):
        """Initialize client with API credentials.

        Passing ``client`` lets callers supply their own transport; it is
        then left open when this client is closed.
        """
        self.timeout = timeout
        self.empty_messages_limit = empty_messages_limit
        self.registry = registry
        self.request_builder = request_builder or RequestBuilder(api_key, base_url, organization)
        self._owns_client = client is None
        self.client = client or self._create_http_client(timeout)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any):
        """Create a client configured from environment settings."""
        settings = settings or get_settings()
        options: Dict[str, Any] = {
            "api_key": settings.api_key,
            "base_url": settings.base_url,
            "organization": settings.organization,
            "timeout": settings.request_timeout,
            "empty_messages_limit": settings.empty_messages_limit,
        }
        options.update(kwargs)
        return cls(**options)

    @abstractmethod
    def _create_http_client(self, timeout: float):
        """Create the httpx client used when none is injected."""
        pass

    def validate_request(self, request: ChatCompletionRequest, streaming: bool) -> None:
        """Reject requests that cannot be sent to the chat endpoint."""
        if not streaming and request.stream:
            raise ChatCompletionStreamNotSupportedError()

        if request.functions and not self.registry.model_supports_functions(request.model):
            raise ModelNotSupportedWithPluginsError(request.model)

        if not self.registry.endpoint_supports_model(CHAT_COMPLETIONS_ENDPOINT, request.model):
            raise ChatCompletionInvalidModelError(request.model, CHAT_COMPLETIONS_ENDPOINT)

    def build_http_request(self, request: ChatCompletionRequest, stream: bool) -> httpx.Request:
        body = request.to_payload(stream=True if stream else None)
        return self.request_builder.build(self.client, "POST", CHAT_COMPLETIONS_ENDPOINT, body, stream=stream)

    def handle_error_response(self, response: httpx.Response, request_id: str) -> Exception:
        """Convert a failed response (body already read) into an error."""
        error = error_from_response(response.status_code, response.content)
        logger.error(f"[{request_id}] Request failed with status {response.status_code}: {error}")
        return error

    def decode_response(self, response: httpx.Response, request_id: str) -> ChatCompletionResponse:
        try:
            completion = ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"[{request_id}] Could not decode chat completion response: {e}")
            raise ResponseDecodeError(f"failed to decode chat completion response: {e}", response.content) from e
        logger.info(
            f"[{request_id}] Chat completion received: id={completion.id}, choices={len(completion.choices)}"
        )
        return completion
