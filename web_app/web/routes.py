"""Plain-text shorten, redirect and ping routes."""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from shorturl.common.url_builder import build_short_url
from shorturl.exceptions import (
    ShortenerError,
    InvalidRequestError,
    NotFoundError,
    StoreUnavailableError,
)

router = APIRouter()


def _internal_error(request: Request, exc: Exception) -> Response:
    request.app.state.logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/", include_in_schema=False)
async def shorten_plain(request: Request):
    """Shorten the URL sent as the raw request body."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        original_url = (await request.body()).decode("utf-8").strip()
    except UnicodeDecodeError:
        return PlainTextResponse("request body must be UTF-8 text", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        result = await service.shorten(original_url, owner_id=getattr(request.state, "owner_id", None))
    except InvalidRequestError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except ShortenerError as e:
        return _internal_error(request, e)

    short_url = build_short_url(result.short_id, config.base_url, config.path_prefix)
    return PlainTextResponse(
        short_url,
        status_code=status.HTTP_409_CONFLICT if result.conflict else status.HTTP_201_CREATED,
    )


@router.get("/ping", include_in_schema=False)
async def ping(request: Request):
    """Liveness probe delegated to the storage backend."""
    service = request.app.state.service

    try:
        await service.ping()
    except StoreUnavailableError as e:
        return _internal_error(request, e)

    return Response(status_code=status.HTTP_200_OK)


@router.get("/{short_id}", include_in_schema=False)
async def redirect(request: Request, short_id: str):
    """Redirect a short id to its original URL."""
    service = request.app.state.service

    try:
        original_url = await service.resolve(short_id)
    except (InvalidRequestError, NotFoundError) as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except ShortenerError as e:
        return _internal_error(request, e)

    return RedirectResponse(original_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
