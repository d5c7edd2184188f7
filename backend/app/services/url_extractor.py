"""Turn an inbound proxy path into the upstream target URL."""
from __future__ import annotations

from urllib.parse import urlsplit

from app.services.failures import InvalidTargetURL

SUPPORTED_SCHEMES = frozenset({"http", "https"})


def extract_target_url(path: str, query_string: str = "") -> str | InvalidTargetURL:
    """Strip the leading slash from ``path`` and reattach ``query_string``.

    The query string is appended exactly as received so that keys such as
    ``api_key=...`` reach the upstream byte for byte.
    """

    target = path[1:] if path.startswith("/") else path
    if not target:
        return InvalidTargetURL(detail="No target URL in request path")

    try:
        parts = urlsplit(target)
        hostname = parts.hostname
    except ValueError as exc:
        return InvalidTargetURL(detail=f"Cannot parse target URL: {exc}")

    if parts.scheme.lower() not in SUPPORTED_SCHEMES or not hostname:
        return InvalidTargetURL(detail=f"Not an absolute http(s) URL: {target}")

    if query_string:
        return f"{target}?{query_string}"
    return target
