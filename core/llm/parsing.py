"""Helpers for pulling structured data out of free-form LLM answers."""
import json
import re
from typing import Any, Dict, Optional

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Find the JSON object embedded in free-form LLM text.

    Tries, in order: the whole text, the first fenced code block, and the
    span from the first '{' to the last '}'. Returns None if none of them
    decodes to a JSON object.
    """
    if not text or not text.strip():
        return None

    candidates = [text.strip()]

    fenced = _CODE_FENCE_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())

    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data

    return None
