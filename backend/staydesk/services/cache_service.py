"""Redis cache service for per-hotel season calendars."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from staydesk.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-backed JSON cache. Any Redis failure behaves as a cache miss."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl or settings.season_cache_ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False

    # Season helpers

    def seasons_key(self, hotel_id: int) -> str:
        return f"seasons:{hotel_id}"

    async def get_seasons(self, hotel_id: int) -> list[dict] | None:
        return await self.get(self.seasons_key(hotel_id))

    async def set_seasons(self, hotel_id: int, data: list[dict]):
        await self.set(self.seasons_key(hotel_id), data, settings.season_cache_ttl)

    async def invalidate_seasons(self, hotel_id: int):
        await self.delete(self.seasons_key(hotel_id))

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
