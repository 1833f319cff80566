"""
Followings router.

This router provides GET /api/get-followings, which resolves a handle through
the upstream service and returns the handles it follows.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from models.followings import ErrorResponse, FollowingsResponse
from models.upstream import CanonicalError, GatewayError
from services.resolution_pipeline import ResolutionPipeline
from services.upstream_adapters import get_adapter
from services.upstream_client import UpstreamClient
from utils.context_utils import get_request_context
from utils.settings import load_upstream_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["followings"])


def error_response(error: CanonicalError) -> JSONResponse:
    content = {"error": error.message}
    if error.details is not None:
        content["details"] = error.details
    return JSONResponse(status_code=error.http_status, content=content)


@router.get(
    "/get-followings",
    response_model=FollowingsResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def get_followings(request: Request, username: Optional[str] = Query(default=None)):
    """
    Resolve a handle and return the handles it follows.

    Args:
        request: FastAPI Request object for header access
        username: Handle to resolve; a leading '@' is tolerated

    Returns:
        FollowingsResponse on success, otherwise an ErrorResponse with the
        status of the classified failure
    """
    try:
        context = get_request_context(request, username)
    except GatewayError as e:
        return error_response(e.error)

    settings = load_upstream_settings()

    try:
        adapter = get_adapter(settings.adapter, settings.base_url)
        async with UpstreamClient(timeout=settings.timeout_seconds) as client:
            pipeline = ResolutionPipeline(
                client=client,
                adapter=adapter,
                credential=settings.credential,
                request_id=context.request_id,
            )
            followings = await pipeline.resolve(context.handle)
    except GatewayError as e:
        logger.warning(
            f"Followings request failed: request_id={context.request_id}, "
            f"handle={context.handle}, kind={e.kind.value}, status={e.http_status}"
        )
        return error_response(e.error)
    except Exception as e:
        logger.error(
            f"Unexpected error while resolving followings: request_id={context.request_id}, "
            f"handle={context.handle}, error={type(e).__name__}: {str(e)}",
            exc_info=True
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service Unavailable: Internal server error while contacting external API.",
                "details": {"message": str(e), "type": type(e).__name__},
            },
        )

    logger.info(
        f"Followings request complete: request_id={context.request_id}, "
        f"handle={context.handle}, count={len(followings)}"
    )

    return FollowingsResponse(followings=followings)
