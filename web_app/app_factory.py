"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from shorturl.exceptions import (
    ShortenerError,
    InvalidRequestError,
    NotFoundError,
)
from .api import api_router
from .web import web_router
from .middleware.gzip_request import GZipRequestMiddleware
from .middleware.headers import OwnerHeaderMiddleware
from .middleware.logging import LoggingMiddleware


def error_status(exc: ShortenerError) -> int:
    """Map a shortener error to an HTTP status code."""
    if isinstance(exc, InvalidRequestError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be set later in the lifespan)
        config: Configuration instance
        logger: Optional logger instance

    Returns:
        Configured FastAPI app
    """
    logger = logger or logging.getLogger("shorturl.web")

    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(GZipRequestMiddleware, logger=logger)
    app.add_middleware(OwnerHeaderMiddleware, header_name=config.owner_header)
    app.add_middleware(LoggingMiddleware, logger=logger)

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        code = error_status(exc)
        if code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
            message = "internal server error"
        else:
            message = str(exc)
        return JSONResponse(status_code=code, content={"message": message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "error JSON decode"},
        )

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
