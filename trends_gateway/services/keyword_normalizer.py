"""
Keyword normalization.

Clients send keywords as a plain string, a delimited list, a bracketed
JSON-like list or an already-split sequence. All of them collapse to one
ordered list of trimmed, non-empty terms. Parsing never raises: anything
that cannot be read structurally is read as a comma-delimited list.
"""
import json
from typing import Any, Iterable, List

from trends_gateway.domain.models.query import KeywordInput

DEFAULT_KEYWORD = "AI"

# Checked in order after the bracketed form.
DELIMITERS = (",", "|", ";")

_QUOTES = "\"'"


def _clean(items: Iterable[Any]) -> List[str]:
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1].strip()
    return text


def _parse_bracketed(text: str) -> List[str]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        parsed = None

    if isinstance(parsed, list):
        return _clean(parsed)

    interior = text[1:-1]
    return _clean(_unquote(part) for part in interior.split(","))


def _parse_string(text: str) -> List[str]:
    text = text.strip()
    if not text:
        return []

    if text.startswith("[") and text.endswith("]"):
        return _parse_bracketed(text)

    for delimiter in DELIMITERS:
        if delimiter in text:
            return _clean(text.split(delimiter))

    return [text]


def normalize_keywords(value: KeywordInput, default: str = DEFAULT_KEYWORD) -> List[str]:
    """
    Parse a keyword parameter in any supported encoding.

    Args:
        value: A string, a sequence of strings, or None
        default: Keyword used when nothing usable was supplied

    Returns:
        List[str]: At least one trimmed, non-empty keyword
    """
    if value is None:
        keywords: List[str] = []
    elif isinstance(value, str):
        keywords = _parse_string(value)
    elif isinstance(value, (list, tuple)):
        keywords = _clean(value)
    else:
        keywords = _parse_string(str(value))

    return keywords or [default]
