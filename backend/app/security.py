"""API key validation against the static allow-list loaded at startup."""
from __future__ import annotations

import logging
from typing import Iterable

from app.services.failures import InvalidCredential, MissingCredential

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class ApiKeyAuthenticator:
    """Exact, case-sensitive membership check of the ``x-api-key`` header."""

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys = frozenset(key for key in keys if key)

    def __len__(self) -> int:
        return len(self._keys)

    def authenticate(self, presented: str | None) -> MissingCredential | InvalidCredential | None:
        if not presented:
            logger.warning("Rejected request without API key")
            return MissingCredential()
        if presented not in self._keys:
            logger.warning("Rejected request with unknown API key")
            return InvalidCredential()
        return None
