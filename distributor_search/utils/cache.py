"""Redis connection used for cross-process coordination (sync locks)."""
from typing import Any, Dict, Optional
import redis.asyncio as aioredis
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger


class CacheService:
    """Thin async Redis wrapper that degrades to disabled when Redis is down."""

    def __init__(self):
        self.redis_client: Optional[aioredis.Redis] = None
        self.enabled = settings.cache_enabled
        self._connection_pool: Optional[aioredis.ConnectionPool] = None
        self._stats = {
            "locks_acquired": 0,
            "locks_contended": 0,
            "errors": 0,
        }

    @property
    def available(self) -> bool:
        return self.enabled and self.redis_client is not None

    async def connect(self):
        """Initialize Redis connection."""
        try:
            self._connection_pool = aioredis.ConnectionPool.from_url(
                settings.redis_url,
                max_connections=20,
                decode_responses=True
            )
            self.redis_client = aioredis.Redis(connection_pool=self._connection_pool)

            # Test connection
            await self.redis_client.ping()
            logger.info("Redis connected successfully")
            self.enabled = True
        except Exception as e:
            logger.warning(f"Redis not available, falling back to database sync locks: {e}")
            self.enabled = False
            self.redis_client = None

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.close()
            if self._connection_pool:
                await self._connection_pool.disconnect()
            self.redis_client = None
            logger.info("Redis disconnected")

    async def acquire_lock(self, key: str, ttl: int) -> Optional[bool]:
        """Try to take ``key`` for ``ttl`` seconds.

        Returns True when acquired, False when someone else holds it, and
        None when Redis could not answer.
        """
        if not self.available:
            return None
        try:
            acquired = await self.redis_client.set(key, "1", nx=True, ex=ttl)
        except Exception as e:
            logger.warning(f"Lock acquire error for key {key}: {e}")
            self._stats["errors"] += 1
            return None
        if acquired:
            self._stats["locks_acquired"] += 1
            return True
        self._stats["locks_contended"] += 1
        return False

    async def release_lock(self, key: str) -> bool:
        if not self.available:
            return False
        try:
            await self.redis_client.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Lock release error for key {key}: {e}")
            self._stats["errors"] += 1
            return False

    def get_stats(self) -> Dict[str, Any]:
        return {**self._stats, "enabled": self.enabled, "connected": self.redis_client is not None}


# Global cache service instance
cache_service = CacheService()
