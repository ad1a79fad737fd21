"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlsplit
from typing import Tuple, List, Iterable

from ..shortcode import ShortCodeGenerator


_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate that a string is an absolute URI.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlsplit(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if not result.scheme or not _SCHEME_RE.match(result.scheme):
        return False, "URL must be absolute (missing scheme)"

    if not result.netloc and not result.path:
        return False, "URL has nothing after the scheme"

    return True, ""


def find_invalid_urls(urls: Iterable[str]) -> List[str]:
    """Collect every URL that fails validation, keeping input order.

    Args:
        urls: URLs to check

    Returns:
        List of offending URLs (empty when all are valid)
    """
    return [url for url in urls if not is_valid_url(url)[0]]


def is_valid_short_id(short_id: str) -> Tuple[bool, str]:
    """Validate a short id.

    Args:
        short_id: The short id to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_id or not isinstance(short_id, str):
        return False, "Short id is required"

    if not ShortCodeGenerator.is_valid_format(short_id):
        return False, "Short id must be exactly 8 letters or digits"

    return True, ""
