from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi import FastAPI

from app.core.config import Settings
from app.main import create_app

TEST_API_KEY = "test-key-123"


@pytest.fixture
def anyio_backend() -> str:
    """Force anyio-based tests to run with asyncio backend only."""

    return "asyncio"


def echo_upstream(request: httpx.Request) -> httpx.Response:
    """Fake upstream that reports back what it received."""

    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "query": request.url.query.decode("ascii"),
            "args": dict(request.url.params),
            "headers": {k: v for k, v in request.headers.items()},
            "body": request.content.decode("utf-8"),
        },
    )


@pytest.fixture
def make_app() -> Callable[..., FastAPI]:
    def _make(
        handler: Callable[[httpx.Request], httpx.Response] = echo_upstream,
        **overrides: object,
    ) -> FastAPI:
        values: dict[str, object] = {
            "api_keys": [TEST_API_KEY],
            "max_requests_per_minute": 100,
            "rate_window_seconds": 60,
        }
        values.update(overrides)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return create_app(Settings(**values), http_client=client)

    return _make
