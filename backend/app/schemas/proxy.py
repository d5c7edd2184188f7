"""Response bodies produced by the proxy itself (never by the upstream)."""
from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable error summary")


class ErrorDetailResponse(ErrorResponse):
    message: str = Field(..., description="Diagnostic detail about the failure")


class RateLimitedResponse(ErrorResponse):
    retryAfter: int = Field(..., description="Seconds until the current window resets")
