"""OpenAI Chat Completions client wrapper.

Notes
- Optional structured output: the batch JSON schema is sent as
  ``response_format`` so the model is constrained to the expected shape
  (the reply is still extracted and validated downstream)
- Provider injection removes the network/openai dependency in tests
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from facts.models.domain import batch_json_schema
from llm.client.errors import EmptyCompletionError, LLMError, LLMTransportError, UpstreamError
from llm.settings import GenerationSettings, get_generation_settings


ProviderFn = Callable[[Dict[str, Any]], Dict[str, Any]]

SCHEMA_NAME = "curiosity_batch"


def _error_type_from_body(body: Any) -> str:
    if isinstance(body, dict):
        return str(body.get("type") or body.get("code") or "unknown_error")
    return "unknown_error"


@dataclass(frozen=True)
class OpenAIClient:
    settings: GenerationSettings
    provider: Optional[ProviderFn] = None

    @classmethod
    def from_env(cls, provider: Optional[ProviderFn] = None) -> "OpenAIClient":
        return cls(get_generation_settings(), provider=provider)

    def _get_provider(self) -> ProviderFn:
        if self.provider is not None:
            return self.provider
        # Lazy import: a missing library surfaces as a clear client error
        try:
            import openai  # type: ignore
        except ImportError as exc:  # pragma: no cover - tests inject a provider
            raise LLMError("openai library is not installed") from exc

        api_key = self.settings.openai_api_key.get_secret_value() if self.settings.openai_api_key else ""
        client = openai.OpenAI(
            api_key=api_key,
            timeout=float(self.settings.facts_request_timeout_seconds),
            max_retries=0,
        )

        def _call(payload: Dict[str, Any]) -> Dict[str, Any]:  # pragma: no cover - network
            try:
                resp = client.chat.completions.create(**payload)
            except openai.APIStatusError as exc:
                raise UpstreamError(
                    exc.status_code,
                    error_type=_error_type_from_body(exc.body),
                    message=str(getattr(exc, "message", "") or ""),
                    request_id=str(exc.request_id or ""),
                ) from exc
            except openai.APIConnectionError as exc:
                raise LLMTransportError("OpenAI request failed") from exc
            # unified dict shape shared with injected test providers
            return {
                "choices": [{"message": {"content": resp.choices[0].message.content}}],
                "usage": {
                    "prompt_tokens": getattr(resp.usage, "prompt_tokens", 0),
                    "completion_tokens": getattr(resp.usage, "completion_tokens", 0),
                },
                "model": resp.model,
            }

        return _call

    def _build_payload(self, messages: List[dict]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.settings.openai_model,
            "messages": messages,
            "temperature": float(self.settings.facts_temperature),
            "max_tokens": int(self.settings.facts_max_tokens),
        }
        if self.settings.openai_structured_output:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": SCHEMA_NAME,
                    "schema": batch_json_schema(),
                    "strict": False,
                },
            }
        return payload

    def complete(self, messages: List[dict]) -> str:
        resp = self._get_provider()(self._build_payload(messages))
        choices = resp.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not isinstance(content, str) or not content:
            raise EmptyCompletionError("OpenAI reply carried no message content")
        return content
