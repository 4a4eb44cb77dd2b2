"""Anthropic Messages API client over httpx.

Notes
- One non-streaming request per call, no automatic retries
- Provider error envelopes (``{"type": "error", "error": {...}, "request_id"}``)
  are reduced to ``UpstreamError`` diagnostics
- Provider injection keeps tests off the network
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx

from llm.client.errors import EmptyCompletionError, LLMTransportError, UpstreamError
from llm.settings import GenerationSettings, get_generation_settings


@dataclass(frozen=True)
class RawReply:
    """Status, body text and lowercased headers of one provider response."""

    status_code: int
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


ProviderFn = Callable[[Dict[str, Any]], RawReply]


def _decode(body: str) -> Optional[Any]:
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return None


def _error_from_reply(reply: RawReply, data: Any) -> UpstreamError:
    error = data.get("error") if isinstance(data, dict) else None
    error = error if isinstance(error, dict) else {}
    request_id = ""
    if isinstance(data, dict) and isinstance(data.get("request_id"), str):
        request_id = data["request_id"]
    return UpstreamError(
        reply.status_code,
        error_type=str(error.get("type") or "unknown_error"),
        message=str(error.get("message") or ""),
        request_id=request_id or reply.headers.get("request-id", ""),
    )


def _first_text_block(data: Dict[str, Any]) -> Optional[str]:
    content = data.get("content")
    if not isinstance(content, list) or not content:
        return None
    block = content[0]
    text = block.get("text") if isinstance(block, dict) else None
    return text if isinstance(text, str) and text else None


@dataclass(frozen=True)
class ClaudeClient:
    settings: GenerationSettings
    provider: Optional[ProviderFn] = None

    @classmethod
    def from_env(cls, provider: Optional[ProviderFn] = None) -> "ClaudeClient":
        return cls(get_generation_settings(), provider=provider)

    def _get_provider(self) -> ProviderFn:
        if self.provider is not None:
            return self.provider

        settings = self.settings
        api_key = settings.claude_api_key.get_secret_value() if settings.claude_api_key else ""
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": settings.anthropic_version,
        }

        def _call(payload: Dict[str, Any]) -> RawReply:
            try:
                resp = httpx.post(
                    settings.anthropic_api_url,
                    headers=headers,
                    json=payload,
                    timeout=float(settings.facts_request_timeout_seconds),
                )
            except httpx.HTTPError as exc:
                raise LLMTransportError(f"Anthropic request failed: {type(exc).__name__}") from exc
            return RawReply(
                status_code=resp.status_code,
                body=resp.text,
                headers={k.lower(): v for k, v in resp.headers.items()},
            )

        return _call

    def _build_payload(self, messages: List[dict]) -> Dict[str, Any]:
        return {
            "model": self.settings.claude_model,
            "max_tokens": int(self.settings.facts_max_tokens),
            "temperature": float(self.settings.facts_temperature),
            "messages": messages,
        }

    def complete(self, messages: List[dict]) -> str:
        """Send ``messages`` and return the first text block of the reply."""
        reply = self._get_provider()(self._build_payload(messages))
        data = _decode(reply.body)

        if not reply.ok:
            raise _error_from_reply(reply, data)
        if not isinstance(data, dict):
            raise UpstreamError(reply.status_code, error_type="invalid_json_from_upstream")

        text = _first_text_block(data)
        if text is None:
            raise EmptyCompletionError("Anthropic reply carried no text content")
        return text
