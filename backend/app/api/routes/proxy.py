"""Catch-all proxy endpoint: ``/<scheme>://<host>/<path>?<query>``."""
from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.responses import Response

from app.deps import get_pipeline

router = APIRouter(tags=["proxy"])


async def proxy(request: Request) -> Response:
    return await get_pipeline(request).handle(request)


# A plain Starlette route with no method list matches every verb, including
# WebDAV and custom ones. OPTIONS never gets here: the CORS middleware
# answers every preflight.
router.add_route("/{target:path}", proxy, methods=None, include_in_schema=False)
