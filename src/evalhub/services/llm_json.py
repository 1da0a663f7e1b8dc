"""Helpers for reading JSON objects out of LLM completions."""

from __future__ import annotations

import json
from typing import Any

from evalhub.domain.exceptions import LlmError


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse *raw* as a JSON object, tolerating markdown code fences."""
    text = raw.strip()

    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else 3
        text = text[first_nl + 1 :]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LlmError(f"LLM returned invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise LlmError("LLM returned JSON that is not an object.")
    return data


def str_list(value: Any) -> list[str]:
    """Normalise an LLM-provided list to non-empty strings."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def int_score(value: Any, default: int = 0) -> int:
    """Coerce an LLM-provided number to an int in [0, 100]."""
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return min(max(number, 0), 100)
