"""
Shared test configuration and fixtures.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Load environment from project root .env file
project_env_file = project_root / ".env"
if project_env_file.exists():
    load_dotenv(project_env_file)


def pytest_collection_modifyitems(items):
    """Add integration marker to tests in integration directory."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def sse(payload) -> bytes:
    """Encode one event the way the API frames it."""
    if not isinstance(payload, str):
        payload = json.dumps(payload)
    return f"data: {payload}\n\n".encode()


def make_chunk(content="", role=None, index=0, finish_reason=None, chunk_id="chatcmpl-test"):
    delta = {}
    if role:
        delta["role"] = role
    if content:
        delta["content"] = content
    return {
        "id": chunk_id,
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "gpt-4",
        "choices": [{"index": index, "delta": delta, "finish_reason": finish_reason}],
    }


@pytest.fixture
def chunk():
    """Factory for chat.completion.chunk payloads."""
    return make_chunk


@pytest.fixture
def sse_line():
    """Factory for framed ``data:`` lines."""
    return sse


@pytest.fixture
def completion_payload():
    """Buffered chat completion body with a single stopped choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello! How can I help you?"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 8, "total_tokens": 18},
    }


@pytest.fixture
def stream_response():
    """Build an unread streaming response from byte chunks.

    Chunks may be bytes or an exception instance, which is raised when the
    reader gets to it.
    """
    def factory(chunks, status_code=200):
        def body():
            for item in chunks:
                if isinstance(item, Exception):
                    raise item
                yield item
        return httpx.Response(status_code, content=body())
    return factory


@pytest.fixture
def async_stream_response():
    """Async variant of ``stream_response``."""
    def factory(chunks, status_code=200):
        async def body():
            for item in chunks:
                if isinstance(item, Exception):
                    raise item
                yield item
        return httpx.Response(status_code, content=body())
    return factory
