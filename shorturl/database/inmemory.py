"""In-memory storage backend for URL shortener."""

import asyncio
import logging
from typing import Optional, List, Dict

from .base import ShortenerDBBase
from .models import ShortLink, BatchItem
from ..exceptions import NotFoundError, URLConflictError


class InMemoryStore(ShortenerDBBase):
    """Dictionary-backed store, lost on process exit.

    Links are kept as ``{owner_id: {short_id: original_url}}`` behind a
    single lock. Duplicate-URL detection scans the owner's entries
    linearly, which is only acceptable for small data sets.

    The service probes for a free id and inserts in two separate steps, so
    two concurrent shorten calls can draw the same id and the later write
    replaces the earlier one. Only the Postgres backend rules this out.
    """

    backend_name = "memory"

    def __init__(self, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self._links: Dict[str, Dict[str, str]] = {}
        self._lock = asyncio.Lock()

    def _find_id_by_url(self, original_url: str, owner_id: str) -> Optional[str]:
        for short_id, url in self._links.get(owner_id, {}).items():
            if url == original_url:
                return short_id
        return None

    def _lookup(self, short_id: str, owner_id: Optional[str]) -> str:
        if owner_id is not None:
            namespaces = [self._links.get(owner_id, {})]
        else:
            namespaces = list(self._links.values())

        for links in namespaces:
            if short_id in links:
                return links[short_id]
        raise NotFoundError(short_id)

    def _insert(self, link: ShortLink) -> Optional[str]:
        """Insert a link unless its URL already exists for the owner.

        Returns:
            The existing short id on conflict, None after a clean insert
        """
        existing = self._find_id_by_url(link.original_url, link.owner_id)
        if existing is not None:
            return existing
        self._links.setdefault(link.owner_id, {})[link.short_id] = link.original_url
        return None

    def _apply_batch(self, items: List[BatchItem]) -> List[BatchItem]:
        for item in items:
            existing = self._insert(item.to_link())
            if existing is not None:
                item.short_id = existing
                item.conflict = True
        return items

    async def get(self, short_id: str, owner_id: Optional[str] = None) -> str:
        async with self._lock:
            return self._lookup(short_id, owner_id)

    async def set(self, link: ShortLink) -> None:
        async with self._lock:
            existing = self._insert(link)
        if existing is not None:
            self.logger.debug(f"URL already stored: {link.original_url} -> {existing}")
            raise URLConflictError(existing, link.original_url)
        self.logger.debug(f"Stored short id {link.short_id} -> {link.original_url}")

    async def set_batch(self, items: List[BatchItem]) -> List[BatchItem]:
        async with self._lock:
            return self._apply_batch(items)

    async def get_user_urls(self, owner_id: str) -> List[ShortLink]:
        async with self._lock:
            return [
                ShortLink(short_id, url, owner_id)
                for short_id, url in self._links.get(owner_id, {}).items()
            ]

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        return None
