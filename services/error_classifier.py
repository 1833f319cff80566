"""
Error Classification for Upstream Responses

Turns an UpstreamCallResult that cannot be used into a CanonicalError. The
caller-facing message is kept short; the upstream payload (or a bounded
preview of it) goes into details.
"""
import logging
from typing import Any, Optional

from models.upstream import CanonicalError, ErrorKind, UpstreamCallResult
from services.response_normalizer import preview, preview_payload
from utils.field_probe import probe, string_at

logger = logging.getLogger(__name__)

# Candidate message locations, highest priority first
ERROR_MESSAGE_EXTRACTORS = [
    string_at("message"),
    string_at("error", "message"),
    string_at("error"),
    string_at("error_message"),
    string_at("errors", 0, "message"),
    string_at("title"),
    string_at("detail"),
]

AUTH_STATUSES = (401, 403)


def extract_error_message(parsed_body: Any) -> Optional[str]:
    """Best-effort error message from an upstream error payload."""
    return probe(parsed_body, ERROR_MESSAGE_EXTRACTORS)


def fallback_message(result: UpstreamCallResult) -> str:
    return result.status_text or f"External API Error {result.status}"


def error_details(result: UpstreamCallResult) -> Any:
    """Bounded parsed body, or a raw-body preview when it did not parse."""
    if result.parsed_body is not None:
        return preview_payload(result.parsed_body)
    return {
        "message": (
            f"The external API returned status {result.status} "
            f"but the response body could not be parsed as JSON."
        ),
        "bodyPreview": preview(result.raw_body),
    }


def classify_failure(result: UpstreamCallResult, context: str = "") -> CanonicalError:
    """
    Classify a non-2xx upstream result.

    Args:
        result: Result with ok=False
        context: Short description of the step, used in log lines

    Returns:
        CanonicalError with the upstream status passed through
    """
    status = result.status
    message = extract_error_message(result.parsed_body) or fallback_message(result)
    details = error_details(result)

    logger.error(
        f"External API error: step={context or 'unknown'}, status={status}, "
        f"message={message!r}"
    )

    if status == 400:
        logger.warning(
            f"External API returned 400 Bad Request. Possible issue with the "
            f"handle or identifier format: step={context or 'unknown'}"
        )
    elif status in AUTH_STATUSES:
        logger.warning(
            f"External API returned {status}. Authentication/Authorization issue. "
            f"API key may be invalid or lack permissions."
        )
    elif status == 404:
        logger.warning(
            f"External API returned 404 Not Found: step={context or 'unknown'}"
        )

    kind = ErrorKind.UPSTREAM_AUTH if status in AUTH_STATUSES else ErrorKind.UPSTREAM
    return CanonicalError(kind=kind, http_status=status, message=message, details=details)


def classify_unusable_success(result: UpstreamCallResult, context: str = "") -> CanonicalError:
    """
    Classify a 2xx upstream result whose body cannot be used.

    Covers an empty body, a body that is not JSON, and a body declared as
    application/json that failed to parse.
    """
    if not result.raw_body.strip():
        reason = "The external API returned a success status with an empty body."
    elif result.declares_json:
        reason = (
            "The external API declared a JSON response, "
            "but its body could not be parsed."
        )
    else:
        reason = "The external API returned a success status, but its response body was not valid JSON."

    logger.error(
        f"Unusable success response: step={context or 'unknown'}, status={result.status}, "
        f"content_type={result.content_type}, preview={preview(result.raw_body, 200)!r}"
    )

    return schema_error(
        "Bad Gateway: Upstream API sent an invalid success response.",
        {"message": reason, "bodyPreview": preview(result.raw_body)},
    )


def schema_error(message: str, details: Any) -> CanonicalError:
    return CanonicalError(
        kind=ErrorKind.UPSTREAM_SCHEMA,
        http_status=502,
        message=message,
        details=details,
    )
