"""Errors raised by upstream model clients."""

from __future__ import annotations

from typing import Any, Dict

UPSTREAM_MESSAGE_LIMIT = 200


class LLMError(Exception):
    """Base error for upstream model calls."""


class UpstreamError(LLMError):
    """Provider answered with a non-success status or an unreadable body.

    Only a trimmed subset of the provider's diagnostics is kept so it can be
    shown to the caller without echoing arbitrary upstream content.
    """

    def __init__(
        self,
        status: int,
        error_type: str = "unknown_error",
        message: str = "",
        request_id: str = "",
    ):
        super().__init__(f"upstream {status}: {error_type}")
        self.status = status
        self.error_type = error_type or "unknown_error"
        self.message = (message or "")[:UPSTREAM_MESSAGE_LIMIT]
        self.request_id = request_id or ""

    def diagnostics(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "upstream_status": self.status,
            "upstream_type": self.error_type,
        }
        if self.message:
            out["upstream_message"] = self.message
        if self.request_id:
            out["upstream_request_id"] = self.request_id
        return out


class EmptyCompletionError(LLMError):
    """Provider succeeded but returned no text."""


class LLMTransportError(LLMError):
    """Network failure before any provider response was received."""
