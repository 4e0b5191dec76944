"""
JSON utilities for recovering objects from model responses.

Handles responses where the JSON object is wrapped in markdown code blocks or
surrounded by extra prose.
"""
import json
import re
from typing import Any, Dict, Optional

_CODE_FENCE = re.compile(r'```(?:json)?\s*\n(.*?)\n?```', re.DOTALL)


def find_balanced_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} substring.

    Braces inside JSON string literals (including escaped quotes) are ignored.

    Args:
        text: Text that may contain a JSON object

    Returns:
        The object substring, or None if no balanced object exists
    """
    start = text.find('{')
    while start != -1:
        depth = 0
        in_string = False
        escaped = False

        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == '\\':
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue

            if ch == '"':
                in_string = True
            elif ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]

        # Unbalanced from this brace; try the next opening brace
        start = text.find('{', start + 1)

    return None


def load_json_object(content: str) -> Optional[Dict[str, Any]]:
    """Parse `content` strictly; return it only if it is a JSON object."""
    try:
        parsed = json.loads(content)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def recover_json_object(content: str) -> Optional[Dict[str, Any]]:
    """
    Best-effort recovery of a JSON object from a malformed response.

    Tries a fenced ```json block first, then the first balanced {...} substring.

    Returns:
        Parsed object, or None if nothing parseable was found
    """
    if not content:
        return None

    fence = _CODE_FENCE.search(content)
    if fence:
        parsed = load_json_object(fence.group(1).strip())
        if parsed is not None:
            return parsed

    candidate = find_balanced_object(content)
    if candidate is None:
        return None
    return load_json_object(candidate)
