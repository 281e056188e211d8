# app/config.py
"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExplorerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXPLORER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    catalog_url: str = "https://openlibrary.org"
    covers_url: str = "https://covers.openlibrary.org"
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    user_agent: str = "book-explorer/1.0 (+https://openlibrary.org/developers/api)"
    # Upper bound on in-memory search views (one per browser session).
    max_sessions: int = Field(default=1000, ge=1)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> ExplorerSettings:
    """Return cached settings instance."""

    return ExplorerSettings()


__all__ = ["ExplorerSettings", "get_settings"]
