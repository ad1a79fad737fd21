"""Database layer for URL shortener."""

from .base import ShortenerDBBase
from .inmemory import InMemoryStore
from .file import FileStore
from .postgres import PostgresStore
from .cache import RedisCache
from .factory import create_store
from .models import ShortLink, BatchItem, ShortenResult, BatchResult

__all__ = [
    "ShortenerDBBase",
    "InMemoryStore",
    "FileStore",
    "PostgresStore",
    "RedisCache",
    "create_store",
    "ShortLink",
    "BatchItem",
    "ShortenResult",
    "BatchResult",
]
