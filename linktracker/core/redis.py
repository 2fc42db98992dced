"""Redis-backed cache for slug lookups on the redirect path."""

import json
from dataclasses import dataclass

import redis.asyncio as redis
import structlog

from linktracker.core.observability import record_cache_lookup

logger = structlog.get_logger()

# Cache key prefixes
LINK_CACHE_PREFIX = "link:"
LINK_CACHE_TTL = 3600  # 1 hour


@dataclass(frozen=True)
class CachedLink:
    """The part of a link the redirect path needs."""

    link_id: int
    url: str


def _link_cache_key(slug: str) -> str:
    """Generate cache key for a link."""
    return f"{LINK_CACHE_PREFIX}{slug}"


class LinkCache:
    """Cache of slug -> (link id, destination URL).

    The cache is optional: without a client every call is a no-op and
    lookups always miss. Redis errors are logged and treated as misses so
    the registry stays the source of truth.
    """

    def __init__(self, client: redis.Redis | None = None, ttl: int = LINK_CACHE_TTL):
        self._client = client
        self._ttl = ttl

    @classmethod
    def from_url(cls, redis_url: str, ttl: int = LINK_CACHE_TTL) -> "LinkCache":
        """Build a cache for ``redis_url``; an empty URL disables caching."""
        if not redis_url:
            return cls(ttl=ttl)
        client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        logger.info("Redis link cache enabled", url=redis_url)
        return cls(client, ttl=ttl)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def get(self, slug: str) -> CachedLink | None:
        """Get a link from cache by slug."""
        if self._client is None:
            return None
        try:
            data = await self._client.get(_link_cache_key(slug))
        except redis.RedisError as e:
            logger.warning("Redis get error", slug=slug, error=str(e))
            record_cache_lookup("error")
            return None

        if not data:
            record_cache_lookup("miss")
            return None

        try:
            cached = json.loads(data)
            link = CachedLink(link_id=int(cached["link_id"]), url=str(cached["url"]))
        except (ValueError, KeyError, TypeError) as e:
            # Entries written by something else under the same prefix
            logger.warning("Unreadable link cache entry", slug=slug, error=str(e))
            record_cache_lookup("error")
            return None

        record_cache_lookup("hit")
        return link

    async def set(self, slug: str, link: CachedLink) -> None:
        """Cache a link by slug."""
        if self._client is None:
            return
        try:
            await self._client.setex(
                _link_cache_key(slug),
                self._ttl,
                json.dumps({"link_id": link.link_id, "url": link.url}),
            )
            logger.debug("Link cached", slug=slug, ttl=self._ttl)
        except redis.RedisError as e:
            logger.warning("Redis set error", slug=slug, error=str(e))

    async def invalidate(self, slug: str) -> None:
        """Invalidate (delete) a link from cache."""
        if self._client is None:
            return
        try:
            await self._client.delete(_link_cache_key(slug))
            logger.debug("Cache invalidated", slug=slug)
        except redis.RedisError as e:
            logger.warning("Redis delete error", slug=slug, error=str(e))

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")
