# castingfy/services/cache_client.py
"""
Best-effort Redis cache.

Redis is optional: with no REDIS_URL every read misses and every write is
dropped. Failures are logged and never reach the caller.
"""

import json
from typing import Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from castingfy.config import settings
from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class CacheClient:
    """Pooled redis.asyncio client with fail-open reads and writes."""

    def __init__(self, url: str | None = None):
        self.url = url
        self.pool: ConnectionPool | None = None
        self.client: redis.Redis | None = None
        self._initialized = False

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def initialize(self) -> None:
        """Open the pool on startup; a missing URL leaves the cache disabled."""
        if self._initialized or not self.enabled:
            if not self.enabled:
                logger.info("Redis cache disabled (no REDIS_URL)")
            return

        try:
            self.pool = ConnectionPool.from_url(
                self.url,
                max_connections=20,
                retry_on_timeout=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30,
                decode_responses=True,
            )
            self.client = redis.Redis(connection_pool=self.pool)
            await self.client.ping()
            self._initialized = True
            logger.info("Redis cache initialized")

        except Exception as e:
            logger.error("Failed to initialize Redis cache", error=str(e))
            self._initialized = False
            raise RuntimeError("Redis initialization failed") from e

    async def close(self) -> None:
        try:
            if self.client:
                await self.client.aclose()
            if self.pool:
                await self.pool.disconnect()
            self._initialized = False
            logger.info("Redis cache closed")
        except Exception as e:
            logger.error("Error closing Redis cache", error=str(e))

    async def ping(self) -> bool:
        if not self._initialized:
            return False
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def get_json(self, key: str) -> Any | None:
        if not self._initialized:
            return None
        try:
            raw = await self.client.get(key)
            return json.loads(raw) if raw else None
        except Exception as e:
            logger.warning("Redis GET failed", key=key[:40], error=str(e))
            return None

    async def set_json(self, key: str, value: Any, ttl_s: int) -> bool:
        if not self._initialized:
            return False
        try:
            return bool(await self.client.setex(key, ttl_s, json.dumps(value)))
        except Exception as e:
            logger.warning("Redis SET failed", key=key[:40], error=str(e))
            return False


# Global instance
cache = CacheClient(settings.REDIS_URL)
