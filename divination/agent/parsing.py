"""Helpers for reading loosely structured JSON out of model responses"""

import json
from typing import Any, Dict, List, Optional


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```) if present."""
    text = text.strip()
    if not text.startswith("```"):
        return text

    lines = text.split("\n")
    inner_lines = []
    for line in lines[1:]:
        if line.strip() == "```":
            break
        inner_lines.append(line)
    return "\n".join(inner_lines).strip()


def load_json(raw: str) -> Any:
    """
    Decode a model response as JSON.

    Returns None when the text is not valid JSON, which is indistinguishable
    from a decoded ``null``.
    """
    try:
        return json.loads(strip_code_fence(raw))
    except (json.JSONDecodeError, TypeError):
        return None


def load_json_object(raw: str) -> Optional[Dict[str, Any]]:
    """
    Decode a model response as a JSON object.

    Returns None when the text is not valid JSON or decodes to anything
    other than an object, so callers can fall back without try/except.
    """
    value = load_json(raw)
    return value if isinstance(value, dict) else None


def get_str(data: Dict[str, Any], key: str) -> Optional[str]:
    """Return data[key] when it is a string, else None."""
    value = data.get(key)
    return value if isinstance(value, str) else None


def get_str_list(data: Dict[str, Any], key: str) -> Optional[List[str]]:
    """Return the string items of data[key] when it is a list, else None."""
    value = data.get(key)
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]
