"""
Normalization of free-form generative responses into structured data.
"""

import json
import logging
import re
from typing import Any, Callable, Iterable, List, Optional

from .models import GroundingSource

logger = logging.getLogger(__name__)

FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def _parse_strict(text: str) -> Any:
    return json.loads(text)


def _parse_fenced_block(text: str) -> Any:
    match = FENCED_BLOCK_PATTERN.search(text)
    if not match:
        raise ValueError("no fenced code block")
    return json.loads(match.group(1))


def _parse_brace_span(text: str) -> Any:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise ValueError("no brace-delimited object")
    return json.loads(text[start:end + 1])


# Ordered from strictest to most permissive; a later parser only runs when
# every earlier one failed.
JSON_PARSERS: List[Callable[[str], Any]] = [
    _parse_strict,
    _parse_fenced_block,
    _parse_brace_span,
]


def extract_json(text: Optional[str]) -> Optional[Any]:
    """
    Extract a JSON value from model output.

    Accepts bare JSON, a fenced ```json block, or an object embedded in prose.
    Returns None when nothing parses; never raises.
    """
    if not text:
        return None
    for parser in JSON_PARSERS:
        try:
            return parser(text)
        except ValueError:
            continue
    logger.error("Failed to parse JSON response: %.200s", text)
    return None


def extract_json_object(text: Optional[str]) -> Optional[dict]:
    """Like extract_json, but only a JSON object counts as a result."""
    value = extract_json(text)
    return value if isinstance(value, dict) else None


def unique_sources(sources: Iterable[GroundingSource]) -> List[GroundingSource]:
    """Drop sources without a URI and repeats of an already seen URI, keeping order."""
    seen = set()
    result = []
    for source in sources:
        if not source.uri or source.uri == "#" or source.uri in seen:
            continue
        seen.add(source.uri)
        result.append(source)
    return result
