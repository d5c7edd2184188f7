"""Request-forwarding pipeline: authenticate, rate limit, extract, forward."""
from __future__ import annotations

import logging

import anyio
from fastapi import Request
from starlette.responses import Response

from app.core.config import Settings
from app.security import API_KEY_HEADER, ApiKeyAuthenticator
from app.services.failures import ProxyFailure, ProxyTransportError
from app.services.forwarder import Forwarder, ProxyRequest, ProxyResponse
from app.services.rate_limit import RateConfig, RateLimiter, rate_limit_headers
from app.services.url_extractor import extract_target_url

logger = logging.getLogger(__name__)

# Logged only; the caller is already gone.
CLIENT_CLOSED_REQUEST = 499


class ProxyPipeline:
    """Run the stages in a fixed order; the first failure ends the request.

    Authentication runs before the limiter so unauthenticated traffic never
    consumes window budget.
    """

    def __init__(
        self,
        *,
        authenticator: ApiKeyAuthenticator,
        rate_limiter: RateLimiter,
        forwarder: Forwarder,
    ) -> None:
        self.authenticator = authenticator
        self.rate_limiter = rate_limiter
        self.forwarder = forwarder

    async def handle(self, request: Request) -> Response:
        auth_failure = self.authenticator.authenticate(request.headers.get(API_KEY_HEADER))
        if auth_failure is not None:
            return auth_failure.to_response()

        admission = self.rate_limiter.check()
        limit_headers = rate_limit_headers(admission)
        if isinstance(admission, ProxyFailure):
            return _with_headers(admission.to_response(), limit_headers)

        path, query_string = _raw_target(request)
        target = extract_target_url(path, query_string)
        if isinstance(target, ProxyFailure):
            logger.warning("Invalid target URL", extra={"path": path, "detail": target.detail})
            return _with_headers(target.to_response(), limit_headers)

        proxy_request = ProxyRequest.from_inbound(
            method=request.method,
            url=target,
            headers=request.headers,
            body=await request.body(),
        )
        outcome = await self._forward_while_connected(request, proxy_request)
        if outcome is None:
            logger.info("Client disconnected, outbound call aborted", extra={"target": target})
            return Response(status_code=CLIENT_CLOSED_REQUEST)
        return _with_headers(outcome.to_response(), limit_headers)

    async def _forward_while_connected(
        self, request: Request, proxy_request: ProxyRequest
    ) -> ProxyResponse | ProxyTransportError | None:
        """Forward, cancelling the outbound call if the caller hangs up first."""

        outcome: ProxyResponse | ProxyTransportError | None = None

        async with anyio.create_task_group() as tg:

            async def _forward() -> None:
                nonlocal outcome
                outcome = await self.forwarder.forward(proxy_request)
                tg.cancel_scope.cancel()

            async def _watch() -> None:
                await _wait_for_disconnect(request)
                tg.cancel_scope.cancel()

            tg.start_soon(_forward)
            tg.start_soon(_watch)
        return outcome


async def _wait_for_disconnect(request: Request) -> None:
    # Only called once the body has been read, so no body chunk is lost.
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


def _raw_target(request: Request) -> tuple[str, str]:
    # raw_path keeps percent-escapes such as %2F intact
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query_string = request.scope.get("query_string", b"").decode("latin-1")
    return path, query_string


def _with_headers(response: Response, headers: dict[str, str]) -> Response:
    # The proxy's own limiter headers replace any the upstream sent.
    for name, value in headers.items():
        response.headers[name] = value
    return response


def build_pipeline(settings: Settings, forwarder: Forwarder) -> ProxyPipeline:
    return ProxyPipeline(
        authenticator=ApiKeyAuthenticator(settings.api_keys),
        rate_limiter=RateLimiter(
            RateConfig(
                window_seconds=settings.rate_window_seconds,
                max_requests=settings.max_requests_per_minute,
            )
        ),
        forwarder=forwarder,
    )
