"""Outbound call to the target URL and relay of the upstream response."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

import httpx
from starlette.responses import Response

from app.core.config import Settings
from app.services.failures import ProxyTransportError

logger = logging.getLogger(__name__)

# Inbound headers forwarded upstream, with the value used when absent.
DEFAULT_FORWARD_HEADERS: dict[str, str] = {
    "user-agent": "Mozilla/5.0",
    "accept": "*/*",
    "accept-encoding": "gzip, deflate, br",
}

# httpx decodes the body, so the outer layer recomputes content-length.
EXCLUDED_RESPONSE_HEADERS = frozenset(
    {"connection", "transfer-encoding", "content-encoding", "content-length"}
)


@dataclass(frozen=True, slots=True)
class ProxyRequest:
    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes = b""

    @classmethod
    def from_inbound(
        cls, *, method: str, url: str, headers: Mapping[str, str], body: bytes
    ) -> "ProxyRequest":
        forwarded = {
            name: headers.get(name) or default
            for name, default in DEFAULT_FORWARD_HEADERS.items()
        }
        content_type = headers.get("content-type")
        if body and content_type:
            forwarded["content-type"] = content_type
        return cls(method=method.upper(), url=url, headers=forwarded, body=body)


@dataclass(frozen=True, slots=True)
class ProxyResponse:
    status_code: int
    headers: tuple[tuple[str, str], ...]
    body: bytes

    @classmethod
    def from_upstream(cls, upstream: httpx.Response) -> "ProxyResponse":
        excluded = EXCLUDED_RESPONSE_HEADERS
        if upstream.request.method == "HEAD" and "content-encoding" not in upstream.headers:
            # No body to measure, so the upstream length is the only truthful one.
            excluded = excluded - {"content-length"}
        headers = tuple(
            (name, value)
            for name, value in upstream.headers.multi_items()
            if name.lower() not in excluded
        )
        return cls(status_code=upstream.status_code, headers=headers, body=upstream.content)

    def to_response(self) -> Response:
        response = Response(content=self.body, status_code=self.status_code)
        for name, value in self.headers:
            if name.lower() == "content-length":
                response.headers[name] = value
            else:
                response.headers.append(name, value)
        return response


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared outbound client; its timeout bounds every forwarded call."""

    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.proxy_timeout_seconds),
        follow_redirects=True,
        max_redirects=settings.proxy_max_redirects,
    )


class Forwarder:
    """Send a :class:`ProxyRequest` upstream and capture the raw reply.

    Every upstream status is relayed as-is. Only transport level failures
    are turned into :class:`ProxyTransportError`.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def forward(self, request: ProxyRequest) -> ProxyResponse | ProxyTransportError:
        logger.info("Proxying to %s", request.url, extra={"method": request.method})
        try:
            upstream = await self._client.request(
                request.method,
                request.url,
                # latin-1 round-trips the bytes Starlette decoded (obs-text included)
                headers={name: value.encode("latin-1") for name, value in request.headers.items()},
                content=request.body or None,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning(
                "Proxy error: %s",
                message,
                extra={"method": request.method, "error_type": exc.__class__.__name__},
            )
            return ProxyTransportError(message=message)

        logger.info(
            "Response status: %s",
            upstream.status_code,
            extra={"method": request.method, "bytes": len(upstream.content)},
        )
        return ProxyResponse.from_upstream(upstream)
