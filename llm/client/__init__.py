"""LLM client module."""

from llm.client.claude_client import ClaudeClient, RawReply
from llm.client.errors import EmptyCompletionError, LLMError, LLMTransportError, UpstreamError
from llm.client.factory import LLMClient, build_llm_client
from llm.client.openai_client import OpenAIClient

__all__ = [
    "ClaudeClient",
    "EmptyCompletionError",
    "LLMClient",
    "LLMError",
    "LLMTransportError",
    "OpenAIClient",
    "RawReply",
    "UpstreamError",
    "build_llm_client",
]
