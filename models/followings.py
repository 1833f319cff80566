"""
Followings Response Models

This module defines the Pydantic models for the GET /api/get-followings API.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field


class FollowingsResponse(BaseModel):
    """
    Successful response body.

    Attributes:
        followings: Handles the resolved account follows, in upstream order
    """
    followings: List[str] = Field(
        ...,
        description="Handles in upstream order, not deduplicated"
    )


class ErrorResponse(BaseModel):
    """
    Failure response body.

    Attributes:
        error: Short caller-facing message
        details: Optional diagnostic payload from the upstream or the gateway
    """
    error: str = Field(
        ...,
        description="Caller-facing error message"
    )
    details: Optional[Any] = Field(
        default=None,
        description="Diagnostic payload for operators"
    )
