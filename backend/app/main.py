"""FastAPI application entrypoint for the secure CORS proxy."""
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request

from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.cors import PreflightCORSMiddleware
from app.services.forwarder import Forwarder, build_http_client
from app.services.pipeline import build_pipeline

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, *, http_client: httpx.AsyncClient | None = None
) -> FastAPI:
    """Build the proxy app; the rate-limit window starts here."""

    settings = settings or get_settings()
    client = http_client or build_http_client(settings)
    pipeline = build_pipeline(settings, Forwarder(client))

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Secure CORS proxy ready",
            extra={
                "api_keys": len(pipeline.authenticator),
                "max_requests": settings.max_requests_per_minute,
                "window_seconds": settings.rate_window_seconds,
                "timeout_seconds": settings.proxy_timeout_seconds,
            },
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Secure CORS Proxy", version="0.1.0", lifespan=lifespan)
    app.state.pipeline = pipeline

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        # Correlation id
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"request_id": request_id, "duration_ms": round(elapsed_ms, 2)},
        )
        response.headers["X-Request-Id"] = request_id
        return response

    # Added last so it wraps everything, including the access log.
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


app = create_app()
