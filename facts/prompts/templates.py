"""Prompt template/builder.

Builds the single user prompt that asks the model for five cited curiosity
facts as raw JSON. The allowlist section is rendered from
``facts.validation.domains`` so the prompt and the validator never drift apart.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from facts.validation.domains import DOMAIN_GROUPS


CATEGORY_ORDER: Tuple[str, ...] = (
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
)

OUTPUT_SKELETON = """{{
  "date": "{today}",
  "items": [
    {{
      "index": 1,
      "emoji": "one relevant emoji",
      "category": "one of: {categories}",
      "title_zh": "Chinese title under 10 characters",
      "title_en": "English title under 8 words",
      "content_zh": "Chinese content 100-150 characters with [1]",
      "content_en": "English content 80-120 words with [1]",
      "insight_zh": "💡 一句点睛中文洞察（20字以内）",
      "insight_en": "💡 One sharp English insight under 20 words",
      "citations": [
        {{
          "label": "[1]",
          "source_type": "Museum / Journal / Encyclopedia / University / Database",
          "source_name": "Publisher + page title",
          "source_url": "https://... (direct page)",
          "locator": "optional: section/heading, object ID, DOI, PMID, or page anchor"
        }}
      ]
    }}
  ]
}}"""


def render_allowed_domains(groups: Dict[str, Tuple[str, ...]] = DOMAIN_GROUPS) -> str:
    return "\n".join(f"{label}: {', '.join(domains)}" for label, domains in groups.items())


def build_curiosity_prompt(today: str, *, reader_name: str = "Nicole") -> str:
    """Prompt text embedding the caller's date and the citation allowlist."""
    categories = " / ".join(CATEGORY_ORDER)
    lines: List[str] = [
        f"You are a curiosity generator for {reader_name}, a highly open, intellectually "
        "adventurous person who loves culture, history, psychology, human nature, natural "
        "science, art, aesthetics, language, food, travel, and philosophy.",
        "",
        "Generate exactly 5 fascinating facts, each from a completely different domain.",
        "",
        "Hard rules:",
        "- Exactly 5 items.",
        '- Each item must include 1-2 citations in "citations".',
        "- content_en and content_zh MUST include inline citation markers like [1] or [1][2].",
        "- At least 1 item must cite a Museum domain.",
        "- At least 1 item must cite a Journal, University, or Database domain.",
        "- source_url must be a direct https URL to a specific page (not a homepage).",
        "- Only use allowed domains listed below. Never fabricate sources or URLs. "
        "If unsure, choose a different fact.",
        "",
        "Allowed domains:",
        render_allowed_domains(),
        "",
        "Return ONLY raw valid JSON:",
        OUTPUT_SKELETON.format(today=today, categories=categories),
    ]
    return "\n".join(lines)


def build_curiosity_messages(today: str, *, reader_name: str = "Nicole") -> List[dict]:
    return [{"role": "user", "content": build_curiosity_prompt(today, reader_name=reader_name)}]
