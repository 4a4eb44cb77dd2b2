"""Configuration for the HTTP gate in front of fact generation."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, NonNegativeInt, PositiveInt, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SiteSettings(BaseSettings):
    """Environment-driven settings for auth, CORS, rate limiting and logging.

    Secrets are optional here on purpose: a missing ``SITE_PASSWORD`` is
    reported per request as a misconfiguration rather than crashing startup.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    site_password: Optional[SecretStr] = Field(None, alias="SITE_PASSWORD", description="Shared site password")
    allowed_origin: str = Field("", alias="ALLOWED_ORIGIN", description="Exact allowed Origin, no trailing slash")
    rate_limit_window_seconds: PositiveInt = Field(60, alias="RATE_LIMIT_WINDOW_SECONDS", description="Fixed window length")
    rate_limit_max_requests: PositiveInt = Field(12, alias="RATE_LIMIT_MAX_REQUESTS", description="Requests admitted per window")
    rate_limit_redis_url: Optional[str] = Field(
        None,
        alias="RATE_LIMIT_REDIS_URL",
        description="Shared Redis counter store; in-memory when unset",
    )
    auth_failure_delay_ms: NonNegativeInt = Field(350, alias="AUTH_FAILURE_DELAY_MS", description="Delay before a 401")
    timezone_max_length: PositiveInt = Field(64, alias="TIMEZONE_MAX_LENGTH", description="Longest accepted IANA name")
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Root log level")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit JSON log lines")

    @field_validator("site_password", mode="before")
    @classmethod
    def _blank_password_is_missing(cls, v):
        if isinstance(v, str) and not v:
            return None
        return v

    @field_validator("allowed_origin")
    @classmethod
    def _normalize_origin(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("rate_limit_redis_url", mode="before")
    @classmethod
    def _blank_redis_url_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("rate_limit_redis_url")
    @classmethod
    def _validate_redis_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "://" not in v:
            raise ValueError("RATE_LIMIT_REDIS_URL must be a redis:// or rediss:// URL")
        return v

    def password(self) -> str:
        return self.site_password.get_secret_value() if self.site_password is not None else ""


@lru_cache()
def get_site_settings() -> SiteSettings:
    try:
        return SiteSettings()
    except ValidationError as exc:
        raise RuntimeError(f"site settings validation failed: {exc}") from exc


def reset_site_settings_cache() -> None:
    """Clear the cached settings (tests)."""
    get_site_settings.cache_clear()  # type: ignore[attr-defined]
