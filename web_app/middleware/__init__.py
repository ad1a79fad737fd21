"""Middleware for URL shortener web app."""

from .gzip_request import GZipRequestMiddleware
from .headers import OwnerHeaderMiddleware
from .logging import LoggingMiddleware

__all__ = ["GZipRequestMiddleware", "OwnerHeaderMiddleware", "LoggingMiddleware"]
