"""Structured output extraction with text-JSON fallback.

Judge adapters that receive free text (rather than a tool call or a
schema-constrained response) use these helpers to recover the JSON
object the prompt asked for.
"""

from __future__ import annotations

import json
import re
from typing import Any


def extract_json_from_text(text: str | None) -> dict[str, Any] | None:
    """Extract a JSON object from a text response.

    Tries three strategies in order:
    1. Direct json.loads on the full text
    2. Markdown code block (```json...```)
    3. Brace extraction (first '{' to last '}')

    Args:
        text: Raw text content from the model response.

    Returns:
        Parsed dict or None if all strategies fail.
    """
    if not text:
        return None

    # Strategy 1: direct parse
    try:
        result = json.loads(text)
        if isinstance(result, dict):
            return result
    except (json.JSONDecodeError, ValueError):
        pass

    # Strategy 2: markdown code block
    match = re.search(r"```(?:json)?\s*\n(.*?)\n\s*```", text, re.DOTALL)
    if match:
        try:
            result = json.loads(match.group(1))
            if isinstance(result, dict):
                return result
        except (json.JSONDecodeError, ValueError):
            pass

    # Strategy 3: brace extraction
    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        try:
            result = json.loads(text[first_brace : last_brace + 1])
            if isinstance(result, dict):
                return result
        except (json.JSONDecodeError, ValueError):
            pass

    return None
