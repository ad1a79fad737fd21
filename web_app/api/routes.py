"""API routes implementation."""

from typing import List
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    BatchRequestItem,
    BatchResponseItem,
    UserURLResponse,
    HealthResponse,
    ErrorResponse,
)
from shorturl.common.url_builder import build_short_url
from shorturl.exceptions import NotFoundError

router = APIRouter()


def _short_url(request: Request, short_id: str) -> str:
    config = request.app.state.config
    return build_short_url(
        short_id=short_id,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
    )


def _owner_id(request: Request):
    return getattr(request.state, "owner_id", None)


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ShortenResponse, "description": "URL already shortened, existing short URL returned"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    result = await service.shorten(body.url, owner_id=_owner_id(request))

    response = ShortenResponse(result=_short_url(request, result.short_id))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT if result.conflict else status.HTTP_201_CREATED,
        content=response.model_dump(),
    )


@router.post(
    "/shorten/batch",
    response_model=List[BatchResponseItem],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"description": "At least one URL was already shortened"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URLs in bulk",
)
async def shorten_batch(request: Request, body: List[BatchRequestItem]):
    """Create shortened URLs for a batch; all URLs are validated first."""
    service = request.app.state.service

    result = await service.shorten_batch(
        body,
        owner_id=_owner_id(request),
    )

    content = [
        BatchResponseItem(
            correlation_id=item.correlation_id,
            short_url=_short_url(request, item.short_id),
        ).model_dump()
        for item in result.items
    ]
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT if result.conflict else status.HTTP_201_CREATED,
        content=content,
    )


@router.get(
    "/user/urls",
    response_model=List[UserURLResponse],
    responses={
        204: {"description": "The user has no short URLs"},
        401: {"model": ErrorResponse, "description": "No user identity on the request"},
    },
    summary="List the caller's short URLs",
)
async def user_urls(request: Request):
    """List every URL shortened by the requesting owner."""
    service = request.app.state.service

    owner_id = _owner_id(request)
    if not owner_id:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"message": "user id is required"},
        )

    try:
        links = await service.user_urls(owner_id)
    except NotFoundError:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return [
        UserURLResponse(
            short_url=_short_url(request, link.short_id),
            original_url=link.original_url,
        )
        for link in links
    ]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
