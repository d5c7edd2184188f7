"""FastAPI dependency helpers."""
from __future__ import annotations

from fastapi import Request

from app.services.pipeline import ProxyPipeline


def get_pipeline(request: Request) -> ProxyPipeline:
    """Return the pipeline built once by the application factory."""

    return request.app.state.pipeline
