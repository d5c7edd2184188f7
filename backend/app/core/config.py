"""Application-wide settings for the CORS proxy."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return value


class Settings(BaseSettings):
    """Global application configuration, read once at startup."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Comma-separated in the environment: API_KEYS=key-a,key-b
    api_keys: Annotated[tuple[str, ...], NoDecode] = Field(default=())
    max_requests_per_minute: int = Field(default=60, gt=0)
    rate_window_seconds: float = Field(default=60.0, gt=0)
    proxy_timeout_seconds: float = Field(default=30.0, gt=0)
    proxy_max_redirects: int = Field(default=5, ge=0)
    cors_allow_origins: Annotated[tuple[str, ...], NoDecode] = Field(default=("*",))
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8088)
    log_level: str = Field(default="INFO")

    @field_validator("api_keys", "cors_allow_origins", mode="before")
    @classmethod
    def _parse_csv(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("api_keys")
    @classmethod
    def _drop_blank_keys(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(key for key in value if key)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
