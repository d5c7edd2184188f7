"""In-memory fixed-window rate limiter shared by every API key."""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.services.failures import RateLimited

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateConfig:
    window_seconds: float
    max_requests: int

    def __post_init__(self) -> None:
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if self.max_requests <= 0:
            raise ValueError("max_requests must be positive")


@dataclass(frozen=True, slots=True)
class RateAdmission:
    """Window snapshot taken at the moment a request was admitted."""

    limit: int
    remaining: int
    reset_after: int
    window_seconds: float


class RateLimiter:
    """One counter for the whole deployment.

    The expiry check, the capacity comparison and the increment happen under
    a single lock, so concurrent callers can never admit more than
    ``max_requests`` per window.
    """

    def __init__(
        self, config: RateConfig, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._window_start = clock()
        self._count = 0

    @property
    def config(self) -> RateConfig:
        return self._config

    def check(self) -> RateAdmission | RateLimited:
        window = self._config.window_seconds
        capacity = self._config.max_requests
        with self._lock:
            now = self._clock()
            if now - self._window_start >= window:
                # new window
                self._window_start = now
                self._count = 0
            reset_after = max(1, math.ceil(window - (now - self._window_start)))
            if self._count < capacity:
                self._count += 1
                return RateAdmission(
                    limit=capacity,
                    remaining=capacity - self._count,
                    reset_after=reset_after,
                    window_seconds=window,
                )
        logger.warning(
            "Rate limit exceeded",
            extra={"limit": capacity, "retry_after": reset_after},
        )
        return RateLimited(retry_after=reset_after, limit=capacity, window_seconds=window)


def rate_limit_headers(outcome: RateAdmission | RateLimited) -> dict[str, str]:
    """Draft-7 ``RateLimit``/``RateLimit-Policy`` headers for a limiter outcome."""

    window = outcome.window_seconds
    policy_window = int(window) if float(window).is_integer() else window
    if isinstance(outcome, RateLimited):
        remaining, reset = 0, outcome.retry_after
    else:
        remaining, reset = outcome.remaining, outcome.reset_after
    headers = {
        "RateLimit-Policy": f"{outcome.limit};w={policy_window}",
        "RateLimit": f"limit={outcome.limit}, remaining={remaining}, reset={reset}",
    }
    if isinstance(outcome, RateLimited):
        headers["Retry-After"] = str(outcome.retry_after)
    return headers
