"""Pull a JSON object out of free-form model output.

Models are told to answer with raw JSON but sometimes wrap it in prose or
markdown fences. ``extract_json_object`` finds the first balanced top-level
object with a single linear scan that ignores braces inside string literals.
"""

from __future__ import annotations

import json
from typing import Any, Optional


class OutputParseError(Exception):
    """Model text could not be turned into a JSON value."""


class ExtractionFailure(OutputParseError):
    """No balanced JSON object was found in the text."""


class InvalidJSON(OutputParseError):
    """A balanced span was found but it does not decode as JSON."""


def extract_json_object(text: Optional[str]) -> Optional[str]:
    s = (text or "").strip()
    start = s.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(s)):
        ch = s[i]

        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if depth == 0:
            return s[start : i + 1]
    return None


def _reject_constant(name: str) -> Any:
    raise InvalidJSON(f"non-standard JSON constant {name}")


def _loads(text: str) -> Any:
    # NaN/Infinity are not JSON and cannot be rendered back to the caller
    value = json.loads(text, parse_constant=_reject_constant)
    try:
        json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (ValueError, UnicodeEncodeError) as exc:
        raise InvalidJSON("decoded value cannot be re-encoded as UTF-8 JSON") from exc
    return value


def parse_model_output(text: str) -> Any:
    """Decode model output, strict parse first and brace extraction second."""
    try:
        return _loads(text.strip())
    except (json.JSONDecodeError, InvalidJSON):
        pass

    extracted = extract_json_object(text)
    if extracted is None:
        raise ExtractionFailure("no JSON object found in model output")
    try:
        return _loads(extracted)
    except json.JSONDecodeError as exc:
        raise InvalidJSON("extracted JSON object failed to decode") from exc
