"""Derived caches keyed by element, invalidated when an element's relations change."""
import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.redis import RedisClient

logger = logging.getLogger(__name__)

# Cache schema version - included in all cache keys (e.g., "m2m:v1:related:...")
#
# Bump this version when the cached payload shape changes (e.g., new fields on
# EntryResponse). Old "m2m:v1:..." keys are then never read and expire via TTL.
CACHE_SCHEMA_VERSION = 1


class ElementCache:
    """
    Cache for related-entry lookups, grouped per element.

    Every cached lookup key is also recorded in a per-element key set so that
    invalidate_element() can drop all derived data for an element without
    scanning the keyspace.
    """

    def __init__(self, redis_client: "RedisClient", ttl: int = 300) -> None:
        """Initialize element cache with Redis client and lookup TTL in seconds."""
        self._redis = redis_client
        self._ttl = ttl

    def _cache_key_related(self, element_id: int, field_handle: str, site_id: int) -> str:
        """Generate cache key for a related-entry lookup."""
        return f"m2m:v{CACHE_SCHEMA_VERSION}:related:{element_id}:{field_handle}:{site_id}"

    def _cache_key_element(self, element_id: int) -> str:
        """Generate key of the set tracking all derived keys for an element."""
        return f"m2m:v{CACHE_SCHEMA_VERSION}:element:{element_id}"

    async def get_related(
        self,
        element_id: int,
        field_handle: str,
        site_id: int,
    ) -> list[dict[str, Any]] | None:
        """
        Get a cached related-entry lookup.

        Returns:
            The cached list of serialized entries, or None on cache miss.
        """
        key = self._cache_key_related(element_id, field_handle, site_id)
        data = await self._redis.get(key)
        if data:
            logger.debug("element_cache_hit key=%s", key)
            return json.loads(data)
        logger.debug("element_cache_miss key=%s", key)
        return None

    async def set_related(
        self,
        element_id: int,
        field_handle: str,
        site_id: int,
        entries: list[dict[str, Any]],
    ) -> None:
        """Cache a related-entry lookup and register its key against the element."""
        key = self._cache_key_related(element_id, field_handle, site_id)
        stored = await self._redis.setex(key, self._ttl, json.dumps(entries, default=str))
        if stored:
            await self._redis.add_to_set(self._cache_key_element(element_id), key, self._ttl)
            logger.debug("element_cache_set key=%s count=%d", key, len(entries))

    async def invalidate_element(self, element_id: int) -> None:
        """Delete every derived cache entry recorded for an element."""
        tracking_key = self._cache_key_element(element_id)
        keys = await self._redis.set_members(tracking_key)
        await self._redis.delete(*keys, tracking_key)
        logger.debug(
            "element_cache_invalidate element_id=%s keys=%d",
            element_id,
            len(keys),
        )


# Global element cache instance (set during app startup)
_element_cache: ElementCache | None = None


def get_element_cache() -> ElementCache | None:
    """Get the global element cache instance."""
    return _element_cache


def set_element_cache(cache: ElementCache | None) -> None:
    """Set the global element cache instance."""
    global _element_cache  # noqa: PLW0603
    _element_cache = cache
