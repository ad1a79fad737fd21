"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import ShortenerService

__all__ = ["ShortCodeGenerator", "ShortenerService"]
