"""Output contract checks for a decoded batch of curiosity facts.

Checks are fail-fast per item. Museum/academic coverage is a batch-wide
aggregate and is only evaluated once every citation is individually valid, so a
malformed citation is reported as itself rather than as missing coverage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Set

from facts.models.domain import CATEGORIES
from facts.validation.domains import classify_url
from facts.validation.urls import is_allowed_url


EXPECTED_ITEM_COUNT = 5
MIN_CITATIONS = 1
MAX_CITATIONS = 2
CITATION_MARKER = "[1]"


class IssueKind(str, Enum):
    MALFORMED_BATCH = "malformed_batch"
    WRONG_ITEM_COUNT = "wrong_item_count"
    INVALID_ITEM = "invalid_item"
    INVALID_INDEX = "invalid_index"
    DUPLICATE_INDEX = "duplicate_index"
    INVALID_CATEGORY = "invalid_category"
    MISSING_CITATION_MARKER = "missing_citation_marker"
    INVALID_CITATION_COUNT = "invalid_citation_count"
    INVALID_CITATION = "invalid_citation"
    DISALLOWED_URL = "disallowed_url"
    MISSING_MUSEUM_SOURCE = "missing_museum_source"
    MISSING_ACADEMIC_SOURCE = "missing_academic_source"


@dataclass(frozen=True)
class ValidationIssue:
    """First contract violation found; ``index`` is the item position (0-based)."""

    kind: IssueKind
    index: Optional[int] = None
    field: Optional[str] = None

    def as_log_fields(self) -> dict[str, Any]:
        return {"issue": self.kind.value, "item_position": self.index, "field": self.field}


def _as_text(value: Any) -> str:
    return str(value or "")


def _is_valid_index(value: Any) -> bool:
    # bool is an int subclass; JSON true/false must not pass as 1/0
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 1 <= value <= EXPECTED_ITEM_COUNT


def validate_batch(candidate: Any) -> Optional[ValidationIssue]:
    """Return the first contract violation in ``candidate`` or None when valid."""
    if not isinstance(candidate, dict):
        return ValidationIssue(IssueKind.MALFORMED_BATCH)
    items = candidate.get("items")
    if not isinstance(items, list) or len(items) != EXPECTED_ITEM_COUNT:
        return ValidationIssue(IssueKind.WRONG_ITEM_COUNT, field="items")

    museum_hits = 0
    academic_hits = 0
    seen_indices: Set[int] = set()

    for pos, item in enumerate(items):
        if not isinstance(item, dict):
            return ValidationIssue(IssueKind.INVALID_ITEM, index=pos)

        idx = item.get("index")
        if not _is_valid_index(idx):
            return ValidationIssue(IssueKind.INVALID_INDEX, index=pos, field="index")
        if idx in seen_indices:
            return ValidationIssue(IssueKind.DUPLICATE_INDEX, index=pos, field="index")
        seen_indices.add(idx)

        category = item.get("category")
        if not isinstance(category, str) or category not in CATEGORIES:
            return ValidationIssue(IssueKind.INVALID_CATEGORY, index=pos, field="category")

        for field in ("content_zh", "content_en"):
            if CITATION_MARKER not in _as_text(item.get(field)):
                return ValidationIssue(IssueKind.MISSING_CITATION_MARKER, index=pos, field=field)

        citations = item.get("citations")
        if not isinstance(citations, list) or not (MIN_CITATIONS <= len(citations) <= MAX_CITATIONS):
            return ValidationIssue(IssueKind.INVALID_CITATION_COUNT, index=pos, field="citations")

        for citation in citations:
            if not isinstance(citation, dict):
                return ValidationIssue(IssueKind.INVALID_CITATION, index=pos, field="citations")
            if not citation.get("source_name") or not citation.get("source_url"):
                return ValidationIssue(IssueKind.INVALID_CITATION, index=pos, field="citations")
            url = citation["source_url"]
            if not is_allowed_url(url):
                return ValidationIssue(IssueKind.DISALLOWED_URL, index=pos, field="source_url")
            host = classify_url(url)
            if host.is_museum:
                museum_hits += 1
            if host.is_academic:
                academic_hits += 1

    if museum_hits < 1:
        return ValidationIssue(IssueKind.MISSING_MUSEUM_SOURCE)
    if academic_hits < 1:
        return ValidationIssue(IssueKind.MISSING_ACADEMIC_SOURCE)
    return None


def add_legacy_source_fields(batch: dict) -> dict:
    """Copy each item's first citation into flat ``source_name``/``source_url``.

    Older front ends read a single source per item. Expects a batch that has
    already passed ``validate_batch``; the batch is updated in place.
    """
    for item in batch["items"]:
        if item.get("source_name"):
            continue
        first = item["citations"][0]
        item["source_name"] = first.get("source_name") or ""
        item["source_url"] = first.get("source_url") or ""
    return batch
