"""Tests for API key authentication."""
from __future__ import annotations

from app.security import ApiKeyAuthenticator
from app.services.failures import InvalidCredential, MissingCredential


def test_missing_key_is_rejected() -> None:
    auth = ApiKeyAuthenticator(["k1"])
    assert isinstance(auth.authenticate(None), MissingCredential)
    assert isinstance(auth.authenticate(""), MissingCredential)


def test_unknown_key_is_rejected() -> None:
    auth = ApiKeyAuthenticator(["k1"])
    assert isinstance(auth.authenticate("k2"), InvalidCredential)


def test_membership_is_exact_and_case_sensitive() -> None:
    auth = ApiKeyAuthenticator(["Secret-Key"])
    assert isinstance(auth.authenticate("secret-key"), InvalidCredential)
    assert isinstance(auth.authenticate("Secret-Key "), InvalidCredential)
    assert auth.authenticate("Secret-Key") is None


def test_blank_keys_are_ignored() -> None:
    auth = ApiKeyAuthenticator(["", "k1", "k1"])
    assert len(auth) == 1


def test_empty_allow_list_rejects_everything() -> None:
    auth = ApiKeyAuthenticator([])
    assert isinstance(auth.authenticate("anything"), InvalidCredential)
