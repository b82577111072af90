"""
Shared fixtures and utilities for integration tests.

A small FastAPI app stands in for the upstream chat completion API. It is
served by uvicorn on a free local port so the client talks real HTTP,
including chunked streaming and connections dropped mid-body.
"""

import asyncio
import json
import socket
import threading
import time

import httpx
import pytest
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse


def _chunk(model: str, delta: dict, finish_reason=None) -> str:
    payload = {
        "id": "chatcmpl-fake",
        "object": "chat.completion.chunk",
        "created": int(time.time()),
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    return f"data: {json.dumps(payload)}\n\n"


def create_fake_upstream() -> FastAPI:
    """OpenAI-compatible fake. The ``x-fake-scenario`` header picks the behaviour."""
    app = FastAPI(title="fake-upstream")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.post("/v1/chat/completions")
    async def chat_completions(request: Request):
        body = await request.json()
        scenario = request.headers.get("x-fake-scenario", "ok")
        model = body["model"]
        words = [m["content"] for m in body["messages"] if m["role"] == "user"][-1].split()

        if request.headers.get("authorization") != "Bearer sk-integration":
            return JSONResponse(
                status_code=401,
                content={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error", "param": None, "code": "invalid_api_key"}},
            )
        if scenario == "server-error":
            return JSONResponse(status_code=503, content="upstream overloaded")

        if not body.get("stream"):
            return {
                "id": "chatcmpl-fake",
                "object": "chat.completion",
                "created": int(time.time()),
                "model": model,
                "choices": [{"index": 0, "message": {"role": "assistant", "content": " ".join(words)}, "finish_reason": "stop"}],
                "usage": {"prompt_tokens": len(words), "completion_tokens": len(words), "total_tokens": 2 * len(words)},
            }

        async def events():
            yield _chunk(model, {"role": "assistant", "content": ""})
            if scenario == "keepalive":
                yield ": ping\n\n\n\n"
            for i, word in enumerate(words):
                await asyncio.sleep(0)
                yield _chunk(model, {"content": word if i == 0 else f" {word}"})
            if scenario == "no-sentinel":
                return
            if scenario == "malformed":
                yield 'data: {"id": "chatcmpl-fake", "choices": [\n\n'
                return
            if scenario == "drop":
                raise RuntimeError("connection dropped by fake upstream")
            yield _chunk(model, {}, "stop")
            yield "data: [DONE]\n\n"

        return StreamingResponse(events(), media_type="text/event-stream")

    return app


class IntegrationTestServer:
    """Runs the fake upstream in a background thread."""

    def __init__(self, host: str = "127.0.0.1", port: int = 0):
        self.host = host
        self.requested_port = port
        self.actual_port = None
        self.server = None
        self.server_thread = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.actual_port}/v1"

    def start(self):
        """Start the test server."""
        if self.requested_port == 0:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.bind(('', 0))
            self.actual_port = sock.getsockname()[1]
            sock.close()
        else:
            self.actual_port = self.requested_port

        config = uvicorn.Config(
            create_fake_upstream(),
            host=self.host,
            port=self.actual_port,
            log_level="warning"
        )
        self.server = uvicorn.Server(config)
        self.server_thread = threading.Thread(target=self.server.run, daemon=True)
        self.server_thread.start()

        max_wait = 15
        for _ in range(max_wait * 10):
            try:
                response = httpx.get(f"http://{self.host}:{self.actual_port}/health", timeout=2.0)
                if response.status_code == 200:
                    break
            except httpx.HTTPError:
                pass
            time.sleep(0.1)
        else:
            raise TimeoutError(f"Server failed to start within {max_wait} seconds on port {self.actual_port}")

    def stop(self):
        """Stop the test server."""
        if self.server:
            self.server.should_exit = True
        if self.server_thread:
            self.server_thread.join(timeout=5)


@pytest.fixture(scope="module")
def fake_upstream():
    """Fixture to start and stop the fake upstream for the entire module."""
    server = IntegrationTestServer()
    server.start()
    yield server
    server.stop()
