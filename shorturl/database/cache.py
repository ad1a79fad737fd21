"""Redis cache layer for short link lookups."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisCache:
    """Read-through cache for resolved short ids.

    Short links are never updated or deleted, so a cached entry can only
    expire, never go stale.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if redis_url:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis. Disables the cache when Redis is unreachable."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get(self, key: str) -> Optional[str]:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(key)
        except RedisError as e:
            self.logger.error(f"Cache get error: {e}")
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Optional TTL override (seconds)

        Returns:
            True if successful
        """
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(key, ttl or self.ttl_seconds, value)
            return True
        except RedisError as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def ping(self) -> bool:
        """Check that Redis answers. A disabled cache counts as healthy."""
        if not self.enabled or not self.client:
            return True
        try:
            await self.client.ping()
            return True
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")

    @staticmethod
    def get_cache_key(short_id: str, owner_id: Optional[str] = None) -> str:
        """Generate cache key for a short id.

        Args:
            short_id: The short id
            owner_id: Owner scope of the lookup; None for the global scope

        Returns:
            Cache key
        """
        if owner_id is None:
            return f"shorturl:link:{short_id}"
        return f"shorturl:owner:{owner_id}:{short_id}"
