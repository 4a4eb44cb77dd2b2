from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


_CATEGORIES = ["History", "Art", "Science", "Nature", "Language"]


def _item(index: int, citations: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "index": index,
        "emoji": "🐈",
        "category": _CATEGORIES[index - 1],
        "title_zh": "猫的故事",
        "title_en": "Cats of the Nile",
        "content_zh": "古埃及人崇拜猫[1]。",
        "content_en": "Ancient Egyptians revered cats [1].",
        "insight_zh": "💡 猫曾是神",
        "insight_en": "💡 Cats were once divine",
        "citations": citations,
    }


def _citation(url: str, source_type: str = "Encyclopedia") -> Dict[str, Any]:
    return {
        "label": "[1]",
        "source_type": source_type,
        "source_name": "Some publisher - page",
        "source_url": url,
    }


VALID_BATCH: Dict[str, Any] = {
    "date": "October 17, 2026",
    "items": [
        _item(1, [_citation("https://www.metmuseum.org/art/collection/search/544227", "Museum")]),
        _item(2, [_citation("https://www.nature.com/articles/s41586-020-2649-2", "Journal")]),
        _item(3, [_citation("https://en.wikipedia.org/wiki/Cat")]),
        _item(
            4,
            [
                _citation("https://www.britannica.com/animal/cat"),
                _citation("https://pubmed.ncbi.nlm.nih.gov/12345678/", "Database"),
            ],
        ),
        _item(5, [_citation("https://www.harvard.edu/in-focus/cats/", "University")]),
    ],
}


@pytest.fixture
def valid_batch() -> Dict[str, Any]:
    """A fresh deep copy of a batch that passes every output check."""
    return copy.deepcopy(VALID_BATCH)
