"""
Context Extraction Utilities

This module builds the RequestContext for a followings request from the
query string and request headers.

The handle arrives from the presentation layer with its leading '@' usually
removed, but the gateway cannot rely on that, so it normalizes again here.
"""

import re
import uuid
import logging
from typing import Optional
from fastapi import Request

from models.request_context import RequestContext
from models.upstream import CanonicalError, ErrorKind, GatewayError

logger = logging.getLogger(__name__)

# Up to 15 letters, digits or underscores
HANDLE_PATTERN = re.compile(r"[A-Za-z0-9_]{1,15}")


def normalize_handle(raw: Optional[str]) -> Optional[str]:
    """
    Strip surrounding whitespace and one leading '@' from a handle.

    Args:
        raw: Handle as supplied by the caller

    Returns:
        The normalized handle, or None if nothing usable remains
    """
    if raw is None:
        return None
    handle = raw.strip()
    if handle.startswith("@"):
        handle = handle[1:].strip()
    return handle or None


def is_valid_handle(handle: str) -> bool:
    """True when handle is safe to place in an upstream URL path."""
    return HANDLE_PATTERN.fullmatch(handle) is not None


def get_request_context(request: Request, username: Optional[str]) -> RequestContext:
    """
    Validate the handle and build the context for this request.

    Args:
        request: FastAPI Request object containing headers
        username: Value of the 'username' query parameter

    Returns:
        RequestContext with handle, request_id and trace_id populated

    Raises:
        GatewayError: ValidationError (400) when the handle is missing, blank
            or not a well-formed handle
    """
    request_id = str(uuid.uuid4())
    trace_id = _extract_trace_id(request, request_id)

    handle = normalize_handle(username)
    if handle is None:
        logger.warning(
            f"Missing username rejected: request_id={request_id}, trace_id={trace_id}"
        )
        raise GatewayError(CanonicalError(
            kind=ErrorKind.VALIDATION,
            http_status=400,
            message="Username is required",
        ))

    if not is_valid_handle(handle):
        logger.warning(
            f"Malformed username rejected: request_id={request_id}, "
            f"trace_id={trace_id}, handle={handle!r}"
        )
        raise GatewayError(CanonicalError(
            kind=ErrorKind.VALIDATION,
            http_status=400,
            message="Invalid username",
            details={
                "message": "A username is 1 to 15 letters, digits or underscores.",
            },
        ))

    logger.info(
        f"Context extracted: request_id={request_id}, "
        f"trace_id={trace_id}, handle={handle}"
    )

    return RequestContext(handle=handle, request_id=request_id, trace_id=trace_id)


def _extract_trace_id(request: Request, request_id: str) -> str:
    """
    Extract trace_id from the X-Trace-Id header, or generate one.

    A header value that is not a valid UUID is replaced with a fresh UUID v4.
    """
    trace_id = request.headers.get("X-Trace-Id")

    if trace_id:
        if _is_valid_uuid(trace_id):
            return trace_id
        logger.warning(
            f"Invalid X-Trace-Id format: {trace_id}. "
            f"request_id={request_id}. Generating new UUID."
        )

    return str(uuid.uuid4())


def _is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError):
        return False
