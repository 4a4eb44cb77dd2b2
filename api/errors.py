"""Failure kinds of the generate endpoint and their public mapping.

Every kind maps to exactly one status code and one fixed message. Internal
detail (which validation rule failed, raw upstream payloads) stays in the logs.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from facts.validation.result import ValidationIssue


class FailureKind(str, Enum):
    AUTH = "auth"
    ORIGIN_FORBIDDEN = "origin_forbidden"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    RATE_LIMITED = "rate_limited"
    MISCONFIGURED = "misconfigured"
    UPSTREAM_ERROR = "upstream_error"
    EMPTY_RESPONSE = "empty_response"
    EXTRACTION_FAILURE = "extraction_failure"
    INVALID_JSON = "invalid_json"
    SCHEMA_VALIDATION_FAILURE = "schema_validation_failure"
    INTERNAL_ERROR = "internal_error"


PUBLIC_ERRORS: Dict[FailureKind, Tuple[int, str]] = {
    FailureKind.AUTH: (401, "Unauthorized"),
    FailureKind.ORIGIN_FORBIDDEN: (403, "Forbidden"),
    FailureKind.METHOD_NOT_ALLOWED: (405, "Method not allowed"),
    FailureKind.RATE_LIMITED: (429, "Too many requests"),
    FailureKind.MISCONFIGURED: (500, "Server misconfigured"),
    FailureKind.INTERNAL_ERROR: (500, "Server error"),
    FailureKind.UPSTREAM_ERROR: (502, "Upstream AI error"),
    FailureKind.EMPTY_RESPONSE: (502, "Empty AI response"),
    FailureKind.EXTRACTION_FAILURE: (502, "Invalid AI output format"),
    FailureKind.INVALID_JSON: (502, "Invalid AI JSON"),
    FailureKind.SCHEMA_VALIDATION_FAILURE: (502, "AI output failed validation"),
}


class FactsServiceError(Exception):
    """A request ended in a terminal failure state."""

    def __init__(
        self,
        kind: FailureKind,
        trace_id: str = "",
        *,
        diagnostics: Optional[Dict[str, Any]] = None,
        issue: Optional[ValidationIssue] = None,
    ):
        super().__init__(kind.value)
        self.kind = kind
        self.trace_id = trace_id
        self.diagnostics = diagnostics or {}
        self.issue = issue

    @property
    def status_code(self) -> int:
        return PUBLIC_ERRORS[self.kind][0]

    def public_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": PUBLIC_ERRORS[self.kind][1]}
        # only upstream failures expose their (already trimmed) diagnostics
        if self.kind is FailureKind.UPSTREAM_ERROR:
            body.update(self.diagnostics)
        return body
