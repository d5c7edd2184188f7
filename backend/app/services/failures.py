"""Terminal outcomes a pipeline stage can produce instead of a success value.

Each failure is a plain value, not an exception: stages return it and the
pipeline checks for it with ``isinstance`` before moving to the next stage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.schemas.proxy import ErrorDetailResponse, ErrorResponse, RateLimitedResponse

MISSING_CREDENTIAL_MESSAGE = "API key is required"
INVALID_CREDENTIAL_MESSAGE = "Invalid API key"
RATE_LIMITED_MESSAGE = "Too many requests, please try again later."
INVALID_TARGET_MESSAGE = "Invalid target URL"
PROXY_ERROR_MESSAGE = "Proxy error occurred"


@dataclass(frozen=True, slots=True)
class ProxyFailure:
    status_code: ClassVar[int] = 500

    def body(self) -> BaseModel:
        raise NotImplementedError

    def to_response(self) -> JSONResponse:
        return JSONResponse(self.body().model_dump(), status_code=self.status_code)


@dataclass(frozen=True, slots=True)
class MissingCredential(ProxyFailure):
    status_code: ClassVar[int] = 401

    def body(self) -> BaseModel:
        return ErrorResponse(error=MISSING_CREDENTIAL_MESSAGE)


@dataclass(frozen=True, slots=True)
class InvalidCredential(ProxyFailure):
    status_code: ClassVar[int] = 401

    def body(self) -> BaseModel:
        return ErrorResponse(error=INVALID_CREDENTIAL_MESSAGE)


@dataclass(frozen=True, slots=True)
class RateLimited(ProxyFailure):
    status_code: ClassVar[int] = 429

    retry_after: int
    limit: int
    window_seconds: float

    def body(self) -> BaseModel:
        return RateLimitedResponse(error=RATE_LIMITED_MESSAGE, retryAfter=self.retry_after)


@dataclass(frozen=True, slots=True)
class InvalidTargetURL(ProxyFailure):
    status_code: ClassVar[int] = 400

    detail: str

    def body(self) -> BaseModel:
        return ErrorDetailResponse(error=INVALID_TARGET_MESSAGE, message=self.detail)


@dataclass(frozen=True, slots=True)
class ProxyTransportError(ProxyFailure):
    status_code: ClassVar[int] = 500

    message: str

    def body(self) -> BaseModel:
        return ErrorDetailResponse(error=PROXY_ERROR_MESSAGE, message=self.message)
