"""
news_extractor.py — pull the JSON article array out of generated text.

Models tend to wrap the array in a markdown fence and surround it with
chatter, so a ```json fence is tried first, then an unlabeled fence, then
the whole text.
"""

import json
import re
from typing import Any, List, Optional

from errors import ExtractionError

JSON_FENCE_RE = re.compile(r"```json[ \t]*\r?\n?(.*?)\r?\n?```", re.DOTALL | re.IGNORECASE)
PLAIN_FENCE_RE = re.compile(r"```[ \t]*\r?\n(.*?)\r?\n?```", re.DOTALL)


def find_fenced_block(text: str) -> Optional[str]:
    for pattern in (JSON_FENCE_RE, PLAIN_FENCE_RE):
        m = pattern.search(text)
        if m:
            return m.group(1)
    return None


def extract_articles(raw_text: str) -> List[Any]:
    """Return the parsed array. Items are passed through without field checks."""
    if not raw_text or not raw_text.strip():
        raise ExtractionError("Generated text is empty")

    fenced = find_fenced_block(raw_text)
    json_text = fenced if fenced is not None else raw_text

    try:
        parsed = json.loads(json_text.strip())
    except ValueError as e:
        where = "fenced block" if fenced is not None else "response text"
        raise ExtractionError(f"Invalid JSON in {where}: {e}") from e

    if not isinstance(parsed, list):
        raise ExtractionError(f"Expected a JSON array, got {type(parsed).__name__}")
    return parsed
