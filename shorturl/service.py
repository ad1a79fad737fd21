"""Business logic service for URL shortener."""

import logging
from typing import Any, Optional, Dict, List, Iterable, Tuple, Union

from .shortcode import ShortCodeGenerator
from .database.base import ShortenerDBBase
from .database.cache import RedisCache
from .database.models import ShortLink, BatchItem, ShortenResult, BatchResult
from .common.validators import is_valid_url, is_valid_short_id, find_invalid_urls
from .exceptions import (
    InvalidRequestError,
    NotFoundError,
    URLConflictError,
    GenerationExhaustedError,
    StoreUnavailableError,
)


class ShortenerService:
    """Service layer for URL shortening business logic."""

    def __init__(
        self,
        store: ShortenerDBBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_generation_attempts: int = 10000,
        max_batch_generation_attempts: int = 100,
    ):
        """Initialize URL shortener service.

        Args:
            store: Storage backend, chosen once at startup
            cache: Optional lookup cache
            short_code_generator: Optional short id generator
            logger: Optional logger
            max_generation_attempts: Id draws allowed per single shorten call
            max_batch_generation_attempts: Id draws allowed per batch item
        """
        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_generation_attempts = max_generation_attempts
        self.max_batch_generation_attempts = max_batch_generation_attempts

    async def resolve(self, short_id: str, owner_id: Optional[str] = None) -> str:
        """Get the original URL for a short id.

        Args:
            short_id: The short id to lookup
            owner_id: Restrict the lookup to one owner; None searches all

        Returns:
            Original URL

        Raises:
            InvalidRequestError: If the id is malformed
            NotFoundError: If the id is unknown in the requested scope
        """
        is_valid, error = is_valid_short_id(short_id)
        if not is_valid:
            raise InvalidRequestError(f"invalid short id {short_id!r}: {error}")

        cache_key = None
        if self.cache:
            cache_key = self.cache.get_cache_key(short_id, owner_id)
            cached_url = await self.cache.get(cache_key)
            if cached_url:
                self.logger.debug(f"Cache hit for {short_id}")
                return cached_url

        try:
            original_url = await self.store.get(short_id, owner_id)
        except NotFoundError:
            self.logger.info(f"Short id not found: {short_id}")
            raise

        if cache_key:
            await self.cache.set(cache_key, original_url)

        self.logger.debug(f"Resolved {short_id} -> {original_url}")
        return original_url

    async def shorten(self, original_url: str, owner_id: Optional[str] = None) -> ShortenResult:
        """Create a short id for a URL.

        When the owner already shortened this URL the existing id is
        returned with ``conflict`` set instead of creating a new one.

        Args:
            original_url: The original long URL
            owner_id: Optional owner namespace

        Returns:
            ShortenResult with the new or pre-existing id

        Raises:
            InvalidRequestError: If the URL is not an absolute URI
            GenerationExhaustedError: If no free id was found
            StoreUnavailableError: On backend failure
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidRequestError(f"invalid URL {original_url!r}: {error}", urls=[original_url])

        short_id = await self._generate_unique_short_id(self.max_generation_attempts)
        link = ShortLink(short_id, original_url, owner_id or "")

        try:
            await self.store.set(link)
        except URLConflictError as e:
            self.logger.info(f"URL already shortened: {original_url} -> {e.short_id}")
            return ShortenResult(short_id=e.short_id, original_url=original_url, conflict=True)

        self.logger.info(f"Created short URL: {short_id} -> {original_url}")
        return ShortenResult(short_id=short_id, original_url=original_url)

    async def shorten_batch(
        self,
        items: Iterable[Union[Tuple[str, str], Any]],
        owner_id: Optional[str] = None,
    ) -> BatchResult:
        """Create short ids for many URLs at once.

        Every URL is validated before anything is generated or stored, so a
        single bad URL rejects the whole batch.

        Args:
            items: ``(correlation_id, original_url)`` pairs, or objects with
                ``correlation_id`` and ``original_url`` attributes
            owner_id: Optional owner namespace shared by all items

        Returns:
            BatchResult with one item per input, in input order

        Raises:
            InvalidRequestError: If the batch is empty or any URL is invalid
            GenerationExhaustedError: If an item found no free id
            StoreUnavailableError: On backend failure
        """
        pairs = [
            item if isinstance(item, (tuple, list)) else (item.correlation_id, item.original_url)
            for item in items
        ]
        if not pairs:
            raise InvalidRequestError("batch is empty")

        invalid = find_invalid_urls(url for _, url in pairs)
        if invalid:
            raise InvalidRequestError(f"invalid URLs: {', '.join(invalid)}", urls=invalid)

        batch = []
        for correlation_id, original_url in pairs:
            short_id = await self._generate_unique_short_id(self.max_batch_generation_attempts)
            batch.append(BatchItem(
                correlation_id=correlation_id,
                original_url=original_url,
                short_id=short_id,
                owner_id=owner_id or "",
            ))

        stored = await self.store.set_batch(batch)
        result = BatchResult(items=stored)

        conflicts = sum(1 for item in stored if item.conflict)
        self.logger.info(f"Stored batch of {len(stored)} URLs ({conflicts} already existed)")
        return result

    async def user_urls(self, owner_id: str) -> List[ShortLink]:
        """List the links an owner has shortened.

        Args:
            owner_id: The owner to list

        Returns:
            Non-empty list of links

        Raises:
            InvalidRequestError: If no owner is given
            NotFoundError: If the owner has no links
        """
        if not owner_id:
            raise InvalidRequestError("owner id is required")

        links = await self.store.get_user_urls(owner_id)
        if not links:
            raise NotFoundError(owner_id)
        return links

    async def ping(self) -> None:
        """Check the storage backend; raises StoreUnavailableError when down."""
        await self.store.ping()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.store.ping()
            db_healthy = True
        except StoreUnavailableError:
            db_healthy = False

        cache_healthy = True
        if self.cache:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def _generate_unique_short_id(self, max_attempts: int) -> str:
        """Draw random ids until one is unused.

        The probe and the later insert are separate store calls.

        Args:
            max_attempts: Number of draws allowed

        Returns:
            Unused short id

        Raises:
            GenerationExhaustedError: If every draw was taken
        """
        for attempt in range(max_attempts):
            short_id = self.generator.generate()
            try:
                await self.store.get(short_id)
            except NotFoundError:
                if attempt:
                    self.logger.debug(f"Generated id after {attempt + 1} attempts: {short_id}")
                return short_id

        self.logger.error(f"Short id generation exhausted after {max_attempts} attempts")
        raise GenerationExhaustedError(max_attempts)

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
