"""Model output validation pipeline."""

from facts.validation.domains import (
    HostClassification,
    classify,
    classify_url,
    has_ambiguous_chars,
    host_matches,
)
from facts.validation.extract import (
    ExtractionFailure,
    InvalidJSON,
    OutputParseError,
    extract_json_object,
    parse_model_output,
)
from facts.validation.result import (
    IssueKind,
    ValidationIssue,
    add_legacy_source_fields,
    validate_batch,
)
from facts.validation.urls import is_allowed_url

__all__ = [
    "ExtractionFailure",
    "HostClassification",
    "InvalidJSON",
    "IssueKind",
    "OutputParseError",
    "ValidationIssue",
    "add_legacy_source_fields",
    "classify",
    "classify_url",
    "extract_json_object",
    "has_ambiguous_chars",
    "host_matches",
    "is_allowed_url",
    "parse_model_output",
    "validate_batch",
]
