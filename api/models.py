from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class GenerateRequest(BaseModel):
    """Body of ``POST /api/generate``; anything malformed degrades to empty."""

    model_config = ConfigDict(extra="ignore")

    password: str = ""
    timezone: str = ""

    @field_validator("password", "timezone", mode="before")
    @classmethod
    def _non_string_is_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @classmethod
    def from_payload(cls, payload: Any) -> "GenerateRequest":
        return cls.model_validate(payload if isinstance(payload, dict) else {})


class HealthStatus(BaseModel):
    status: str
