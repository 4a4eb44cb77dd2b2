"""Pick the upstream client for the configured provider."""

from __future__ import annotations

from typing import List, Optional, Protocol

from llm.client.claude_client import ClaudeClient
from llm.client.openai_client import OpenAIClient
from llm.settings import GenerationSettings, get_generation_settings


class LLMClient(Protocol):
    def complete(self, messages: List[dict]) -> str: ...  # noqa: D401


def build_llm_client(settings: Optional[GenerationSettings] = None) -> LLMClient:
    cfg = settings or get_generation_settings()
    if cfg.llm_provider == "openai":
        return OpenAIClient(cfg)
    return ClaudeClient(cfg)
