"""Settings for the fact generation (upstream LLM) call."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, PositiveInt, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationSettings(BaseSettings):
    """Environment-driven configuration for the upstream model provider."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    llm_provider: Literal["anthropic", "openai"] = Field(
        "anthropic", alias="LLM_PROVIDER", description="Which provider generates the facts"
    )
    claude_api_key: Optional[SecretStr] = Field(None, alias="CLAUDE_API_KEY", description="Anthropic API key")
    claude_model: str = Field("claude-3-5-haiku-20241022", alias="CLAUDE_MODEL", description="Anthropic model name")
    anthropic_api_url: str = Field(
        "https://api.anthropic.com/v1/messages",
        alias="ANTHROPIC_API_URL",
        description="Anthropic Messages API endpoint",
    )
    anthropic_version: str = Field("2023-06-01", alias="ANTHROPIC_VERSION", description="anthropic-version header")
    openai_api_key: Optional[SecretStr] = Field(None, alias="OPENAI_API_KEY", description="OpenAI API key")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL", description="OpenAI model name")
    openai_structured_output: bool = Field(
        True,
        alias="OPENAI_STRUCTURED_OUTPUT",
        description="Constrain OpenAI output with the batch JSON schema",
    )
    facts_max_tokens: PositiveInt = Field(4096, alias="FACTS_MAX_TOKENS", description="Max completion tokens")
    facts_temperature: float = Field(0.6, ge=0.0, le=2.0, alias="FACTS_TEMPERATURE", description="Sampling temperature")
    facts_request_timeout_seconds: PositiveInt = Field(
        60,
        alias="FACTS_REQUEST_TIMEOUT_SECONDS",
        description="HTTP request timeout in seconds",
    )
    facts_reader_name: str = Field("Nicole", alias="FACTS_READER_NAME", description="Reader named in the prompt")

    @field_validator("claude_api_key", "openai_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("anthropic_api_url")
    @classmethod
    def _https_endpoint(cls, v: str) -> str:
        s = v.strip()
        if not s.startswith("https://"):
            raise ValueError("ANTHROPIC_API_URL must be an https URL")
        return s

    def active_api_key(self) -> str:
        """API key of the selected provider, or an empty string when unset."""
        key = self.claude_api_key if self.llm_provider == "anthropic" else self.openai_api_key
        return key.get_secret_value() if key is not None else ""

    def active_model(self) -> str:
        return self.claude_model if self.llm_provider == "anthropic" else self.openai_model


@lru_cache()
def get_generation_settings() -> GenerationSettings:
    try:
        return GenerationSettings()
    except ValidationError as exc:
        raise RuntimeError(f"generation settings validation failed: {exc}") from exc


def reset_generation_settings_cache() -> None:
    get_generation_settings.cache_clear()  # type: ignore[attr-defined]
