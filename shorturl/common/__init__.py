"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_id, find_invalid_urls
from .headers import extract_owner_id
from .url_builder import build_short_url
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_id",
    "find_invalid_urls",
    "extract_owner_id",
    "build_short_url",
    "setup_logging",
]
