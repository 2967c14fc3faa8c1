"""Transport configuration using pydantic-settings.

Environment variables (prefix `BOLDEM_`) are the sole source of truth. Use
`get_settings()` to share one instance; constructor arguments on
`BoldemTransport` take precedence over anything here.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    EMAIL_PROVIDER: str = Field("boldem", description="Provider selected by get_email_service(): boldem | noop")

    # OAuth client credentials
    CLIENT_ID: Optional[str] = None
    CLIENT_SECRET: Optional[str] = None

    API_URL: str = Field("https://api.boldem.cz/api/", description="Base URL; endpoint paths are appended")
    DEFAULT_HEADERS: Dict[str, str] = Field(
        default_factory=dict,
        description="Headers added to every message unless the message sets the same name (JSON object in env)",
    )

    # Transport behaviour
    VERIFY_TLS: bool = True
    SUPPRESS_TRANSPORT_ERRORS: bool = Field(True, description="Map DNS/connection errors to a failed send instead of raising")
    TIMEOUT: float = 30.0
    RECORD_HISTORY: bool = True

    # Token lifecycle; expires_in is ignored unless TOKEN_EXPIRY is enabled
    TOKEN_EXPIRY: bool = False
    TOKEN_EXPIRY_LEEWAY: int = Field(60, ge=0)

    LOG_LEVEL: str = Field(
        "INFO",
        description="structlog filtering level; boldem_mailer.logging reads BOLDEM_LOG_LEVEL once at import time",
    )

    model_config = SettingsConfigDict(env_prefix="BOLDEM_", env_file=None, case_sensitive=False, extra="ignore")

    @property
    def has_credentials(self) -> bool:
        return bool(self.CLIENT_ID and self.CLIENT_SECRET)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
