"""Tests for target URL extraction from the inbound path."""
from __future__ import annotations

import pytest

from app.services.failures import InvalidTargetURL
from app.services.url_extractor import extract_target_url


def test_strips_leading_slash() -> None:
    assert extract_target_url("/https://api.example.com/data") == "https://api.example.com/data"


def test_reattaches_query_verbatim() -> None:
    query = "stateCode=MN&limit=5&api_key=fake-key"
    url = extract_target_url("/https://developer.nps.gov/api/v1/parks", query)
    assert url == f"https://developer.nps.gov/api/v1/parks?{query}"


def test_query_is_not_reencoded() -> None:
    query = "q=a%20b&empty=&dup=1&dup=2&x=%2F"
    url = extract_target_url("/http://example.com/search", query)
    assert url.endswith("?" + query)


@pytest.mark.parametrize(
    "path",
    ["/", "", "/not-a-valid-url", "/ftp://example.com/file", "/https://", "/http://[::1"],
)
def test_rejects_paths_without_absolute_url(path: str) -> None:
    result = extract_target_url(path)
    assert isinstance(result, InvalidTargetURL)
    assert result.status_code == 400
    assert result.detail


def test_accepts_host_with_port() -> None:
    assert extract_target_url("/http://localhost:9000/x") == "http://localhost:9000/x"
