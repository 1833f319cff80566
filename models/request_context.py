"""
Request Context Data Model

This module defines the RequestContext dataclass holding the caller-supplied
handle and the identifiers used to correlate log lines for one request.
"""

from dataclasses import dataclass


@dataclass
class RequestContext:
    """
    Context information extracted from the query string and request headers.

    A context lives for exactly one request; nothing in it is shared between
    concurrent callers.

    Attributes:
        handle: Account handle to resolve, whitespace and one leading '@' removed
        request_id: UUID v4 uniquely identifying this specific request
        trace_id: UUID v4 for distributed tracing (from X-Trace-Id header or generated)
    """
    handle: str
    request_id: str
    trace_id: str
