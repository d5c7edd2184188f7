"""Tests for environment-driven settings."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_reads_comma_separated_keys_from_env(monkeypatch) -> None:
    monkeypatch.setenv("API_KEYS", "key-a, key-b,,key-c ")
    monkeypatch.setenv("MAX_REQUESTS_PER_MINUTE", "5")
    monkeypatch.setenv("PORT", "9000")
    settings = Settings(_env_file=None)
    assert settings.api_keys == ("key-a", "key-b", "key-c")
    assert settings.max_requests_per_minute == 5
    assert settings.port == 9000


def test_defaults(monkeypatch) -> None:
    for name in ("API_KEYS", "MAX_REQUESTS_PER_MINUTE", "PORT", "PROXY_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.api_keys == ()
    assert settings.max_requests_per_minute == 60
    assert settings.rate_window_seconds == 60
    assert settings.proxy_timeout_seconds == 30
    assert settings.port == 8088
    assert settings.cors_allow_origins == ("*",)


def test_accepts_keys_as_a_list() -> None:
    assert Settings(_env_file=None, api_keys=["a", ""]).api_keys == ("a",)


def test_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_requests_per_minute=0)
