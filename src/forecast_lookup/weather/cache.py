"""
Weather cache backed by Redis.

Values are JSON text written with a TTL; Redis handles expiry. Keys are
namespaced with the configured prefix:

    forecast-lookup:current:37.7749:-122.4194
    forecast-lookup:forecast:37.7749:-122.4194
    forecast-lookup:zip:94105

Redis failures are logged and treated as cache misses.
"""

import logging
from typing import Any, Optional

from forecast_lookup.config import CACHE_PREFIX

logger = logging.getLogger(__name__)


class WeatherCache:
    """
    Async key/value cache.

    Usage:
        cache = WeatherCache(redis_client)
        raw = await cache.get("zip:94105")
        if raw is None:
            raw = await compute()
            await cache.set("zip:94105", raw, ttl=1800)
    """

    def __init__(self, redis: Optional[Any], prefix: str = CACHE_PREFIX) -> None:
        """
        Args:
            redis: An async Redis client (redis.asyncio compatible).
                   May be None; every lookup is then a miss.
            prefix: Namespace prepended to every key
        """
        self._redis = redis
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    async def get(self, key: str) -> Optional[str]:
        """Return the cached text for key, or None on miss / unavailable."""
        if self._redis is None:
            return None

        full_key = self._key(key)
        try:
            raw = await self._redis.get(full_key)
        except Exception:
            logger.warning("Cache GET failed for key=%s", full_key, exc_info=True)
            return None

        if raw is None:
            logger.debug("Cache miss: %s", full_key)
            return None

        logger.debug("Cache hit: %s", full_key)
        return raw.decode("utf-8") if isinstance(raw, bytes) else raw

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Store value under key for ttl seconds."""
        if self._redis is None:
            return

        full_key = self._key(key)
        try:
            await self._redis.set(full_key, value, ex=ttl)
            logger.debug("Cached: key=%s ttl=%ds", full_key, ttl)
        except Exception:
            logger.warning("Cache SET failed for key=%s", full_key, exc_info=True)

    async def exists(self, key: str) -> bool:
        if self._redis is None:
            return False

        full_key = self._key(key)
        try:
            return bool(await self._redis.exists(full_key))
        except Exception:
            logger.warning("Cache EXISTS failed for key=%s", full_key, exc_info=True)
            return False

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
