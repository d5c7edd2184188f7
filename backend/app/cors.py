"""CORS handling for browser callers of the proxy."""
from __future__ import annotations

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.types import Receive, Scope, Send


class PreflightCORSMiddleware(CORSMiddleware):
    """Starlette's CORS middleware, except every ``OPTIONS`` gets a 204.

    Preflights are answered here, ahead of routing, so they never need an
    API key and never count against the rate limit. Requests that are not
    strictly CORS preflights (no ``Origin`` or no requested method) are
    answered the same way.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            response = self.preflight_response(request_headers=Headers(scope=scope))
            await response(scope, receive, send)
            return
        await super().__call__(scope, receive, send)

    def preflight_response(self, request_headers: Headers) -> Response:
        if "origin" in request_headers and "access-control-request-method" in request_headers:
            checked = super().preflight_response(request_headers=request_headers)
            if checked.status_code != 200:
                return checked
            headers = {
                name: value
                for name, value in checked.headers.items()
                if name not in ("content-length", "content-type")
            }
            return Response(status_code=204, headers=headers)

        headers = dict(self.preflight_headers)
        requested_headers = request_headers.get("access-control-request-headers")
        if self.allow_all_headers and requested_headers is not None:
            headers["Access-Control-Allow-Headers"] = requested_headers
        return Response(status_code=204, headers=headers)
