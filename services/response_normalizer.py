"""Decoding of upstream response bodies."""
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 500


def decode_text(content: Optional[bytes]) -> str:
    """Decode a response body as UTF-8; invalid bytes become U+FFFD."""
    if not content:
        return ""
    return content.decode("utf-8", errors="replace")


def parse_body(text: str) -> Any:
    """
    Parse text as JSON without ever raising.

    Empty or whitespace-only text is None without a parse attempt; so is
    anything json cannot decode.
    """
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.debug(f"Body is not JSON: preview={preview(text, 80)!r}")
        return None


def preview(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """Truncate text to at most limit characters for logs and error details."""
    if text is None:
        return ""
    return text[:limit]


def preview_payload(payload: Any, limit: int = PREVIEW_LIMIT) -> Any:
    """
    Bound a decoded payload for inclusion in error details.

    Payloads whose JSON form fits within limit are returned unchanged;
    larger ones are replaced by a truncated JSON string.
    """
    try:
        encoded = json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return preview(repr(payload), limit)
    if len(encoded) <= limit:
        return payload
    return preview(encoded, limit)
