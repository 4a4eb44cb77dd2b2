"""DTO/schema: the curiosity fact batch returned to the front end.

Pydantic v2 models describe the batch shape. They produce the JSON schema used
for provider-side structured output; the contract checks that gate a response
live in ``facts.validation.result`` and operate on the decoded JSON directly.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, Field, field_validator


Category = Literal[
    "Psychology",
    "History",
    "Nature",
    "Culture",
    "Philosophy",
    "Language",
    "Food",
    "Art",
    "Science",
    "Folklore",
]

CATEGORIES: frozenset[str] = frozenset(get_args(Category))

SourceType = Literal["Museum", "Journal", "Encyclopedia", "University", "Database"]


class Citation(BaseModel):
    """A source backing one fact; ``label`` is the inline marker, e.g. ``[1]``."""

    label: str = Field(..., max_length=8)
    source_type: SourceType
    source_name: str = Field(..., min_length=1, description="Publisher + page title")
    source_url: str = Field(..., description="Direct https URL to a specific page")
    locator: Optional[str] = Field(
        default=None,
        description="Section/heading, object ID, DOI, PMID, or page anchor",
    )

    @field_validator("source_name", "source_url")
    @classmethod
    def _strip_nonempty(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("field must not be blank")
        return s


class FactItem(BaseModel):
    index: int = Field(..., ge=1, le=5)
    emoji: str
    category: Category
    title_zh: str
    title_en: str
    content_zh: str = Field(..., description="Chinese content with inline markers like [1]")
    content_en: str = Field(..., description="English content with inline markers like [1]")
    insight_zh: str
    insight_en: str
    citations: List[Citation] = Field(..., min_length=1, max_length=2)


class BatchResult(BaseModel):
    date: str
    items: List[FactItem] = Field(..., min_length=5, max_length=5)


def batch_json_schema() -> Dict[str, Any]:
    """JSON schema for ``BatchResult`` suitable for a structured-output request."""
    return BatchResult.model_json_schema()
