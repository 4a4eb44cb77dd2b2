"""LLM module - upstream model clients and settings."""

from llm.client import (
    ClaudeClient,
    EmptyCompletionError,
    LLMClient,
    LLMError,
    LLMTransportError,
    OpenAIClient,
    UpstreamError,
    build_llm_client,
)
from llm.settings import GenerationSettings, get_generation_settings, reset_generation_settings_cache

__all__ = [
    "ClaudeClient",
    "EmptyCompletionError",
    "LLMClient",
    "LLMError",
    "LLMTransportError",
    "OpenAIClient",
    "UpstreamError",
    "build_llm_client",
    "GenerationSettings",
    "get_generation_settings",
    "reset_generation_settings_cache",
]
