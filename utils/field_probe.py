"""
Ordered Field Probing

Upstream payloads put the same piece of information in different places
depending on the variant that answered. This module provides one combinator,
probe(), that walks an ordered list of extractors and returns the first hit.
It backs error-message extraction, identifier extraction and relation-array
detection.

A path step is either a dict key (str) or a list index (int). Any step that
does not apply to the value at hand yields None instead of raising.
"""

from typing import Any, Callable, Optional, Sequence, Union

Extractor = Callable[[Any], Any]
PathStep = Union[str, int]

_MISSING = object()


def probe(payload: Any, extractors: Sequence[Extractor]) -> Any:
    """
    Return the first non-None result of applying each extractor to payload.

    Args:
        payload: Decoded JSON value (any type)
        extractors: Extractors tried in priority order

    Returns:
        The first non-None extractor result, or None if nothing matched
    """
    for extract in extractors:
        value = extract(payload)
        if value is not None:
            return value
    return None


def _walk(payload: Any, path: Sequence[PathStep]) -> Any:
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return _MISSING
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return _MISSING
            current = current[step]
    return current


def string_at(*path: PathStep) -> Extractor:
    """Extractor for a non-empty string at path."""
    def extract(payload: Any) -> Optional[str]:
        value = _walk(payload, path)
        if isinstance(value, str) and value:
            return value
        return None
    return extract


def list_at(*path: PathStep) -> Extractor:
    """Extractor for a list at path. An empty path matches the payload itself."""
    def extract(payload: Any) -> Optional[list]:
        value = _walk(payload, path)
        if isinstance(value, list):
            return value
        return None
    return extract


def identifier_at(*path: PathStep) -> Extractor:
    """
    Extractor for an identifier at path, rendered as a string.

    Accepts a non-empty string, or an int (bool excluded) which is rendered
    in decimal.
    """
    def extract(payload: Any) -> Optional[str]:
        value = _walk(payload, path)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None
    return extract


def tagged(tag: Any, extractor: Extractor) -> Extractor:
    """Wrap an extractor so a hit is returned as (tag, value)."""
    def extract(payload: Any) -> Optional[tuple]:
        value = extractor(payload)
        if value is None:
            return None
        return tag, value
    return extract
