"""
Upstream Exchange Models

Transient data carried between the upstream client, the error classifier and
the shape extractor. Nothing here outlives a single pipeline invocation.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional


class ErrorKind(str, enum.Enum):
    """Canonical error taxonomy exposed by the gateway."""
    VALIDATION = "ValidationError"
    CONFIGURATION = "ConfigurationError"
    HANDLE_NOT_FOUND = "HandleNotFound"
    UPSTREAM_AUTH = "UpstreamAuthError"
    UPSTREAM_SCHEMA = "UpstreamSchemaError"
    UPSTREAM = "UpstreamError"
    TRANSPORT = "TransportError"


@dataclass
class UpstreamCallResult:
    """
    Raw outcome of one upstream GET.

    Attributes:
        ok: True when the upstream answered with a 2xx status
        status: HTTP status code returned by the upstream
        raw_body: Response body decoded as text ('' when absent)
        parsed_body: JSON-decoded body, or None when empty or unparsable
        status_text: HTTP reason phrase (may be empty)
        content_type: Value of the Content-Type header, if any
    """
    ok: bool
    status: int
    raw_body: str
    parsed_body: Any = None
    status_text: str = ""
    content_type: Optional[str] = None

    @property
    def declares_json(self) -> bool:
        return bool(self.content_type) and "application/json" in self.content_type.lower()


@dataclass
class CanonicalError:
    """
    Classified failure with a status that maps onto the caller-facing response.

    Attributes:
        kind: Taxonomy entry
        http_status: Status returned to the caller
        message: Short caller-facing message
        details: Diagnostic payload (bounded), kept apart from the message
    """
    kind: ErrorKind
    http_status: int
    message: str
    details: Any = None


class GatewayError(Exception):
    """
    Raised when a request cannot be completed.

    Attributes:
        error: The CanonicalError describing the failure
    """
    def __init__(self, error: CanonicalError):
        self.error = error
        super().__init__(error.message)

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def http_status(self) -> int:
        return self.error.http_status


class RelationShape(str, enum.Enum):
    """Recognized layouts of a successful relations payload."""
    ROOT_ARRAY = "root_array"
    DATA_ARRAY = "data_array"
    USERS_ARRAY = "users_array"
    DATA_USERS_ARRAY = "data_users_array"
    UNRECOGNIZED = "unrecognized"


@dataclass
class ParsedRelations:
    """
    Relations payload after shape detection.

    UNRECOGNIZED always carries an empty entry list.
    """
    shape: RelationShape
    entries: List[Any] = field(default_factory=list)

    @property
    def recognized(self) -> bool:
        return self.shape is not RelationShape.UNRECOGNIZED


@dataclass
class UpstreamRequest:
    """URL and query parameters for one upstream GET."""
    url: str
    params: Optional[dict] = None
