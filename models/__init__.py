"""Data models for the followings gateway."""
from .request_context import RequestContext
from .upstream import (
    ErrorKind,
    UpstreamCallResult,
    CanonicalError,
    GatewayError,
    RelationShape,
    ParsedRelations,
    UpstreamRequest,
)
from .followings import FollowingsResponse, ErrorResponse

__all__ = [
    # Request context
    "RequestContext",
    # Upstream exchange
    "ErrorKind",
    "UpstreamCallResult",
    "CanonicalError",
    "GatewayError",
    "RelationShape",
    "ParsedRelations",
    "UpstreamRequest",
    # Wire models
    "FollowingsResponse",
    "ErrorResponse",
]
