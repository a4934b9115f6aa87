"""Redis cache for tenant negotiation settings.

Every failure degrades to a cache miss. After a connection failure the service
stops talking to redis for ``cache_retry_seconds`` instead of reconnecting on
each request.
"""

import json
import logging
import time
from typing import Any

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from locai.config import settings

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


class CacheService:

    def __init__(self):
        self._redis: redis.Redis | None = None
        self._retry_at = 0.0  # time.monotonic() before which redis is not contacted

    def _back_off(self, error: Exception):
        self._redis = None
        self._retry_at = time.monotonic() + settings.cache_retry_seconds
        logger.warning(f"Redis unavailable, cache bypassed for {settings.cache_retry_seconds}s: {error}")

    async def _client(self) -> redis.Redis | None:
        if not settings.cache_enabled:
            return None
        if self._redis is not None:
            return self._redis
        if time.monotonic() < self._retry_at:
            return None

        client = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        try:
            await client.ping()
        except Exception as e:
            await client.aclose()
            self._back_off(e)
            return None
        self._redis = client
        return client

    def _handle_error(self, action: str, key: str, error: Exception):
        if isinstance(error, _CONNECTION_ERRORS):
            self._back_off(error)
        else:
            logger.debug(f"Cache {action} failed for {key}: {error}")

    async def get(self, key: str) -> Any | None:
        """Decoded value, or None on miss, error or while backing off."""
        client = await self._client()
        if client is None:
            return None
        try:
            raw = await client.get(key)
        except Exception as e:
            self._handle_error("read", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding non-JSON cache entry {key}")
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        client = await self._client()
        if client is None:
            return False
        try:
            await client.set(key, json.dumps(value, default=str), ex=ttl or settings.negotiation_settings_cache_ttl)
        except Exception as e:
            self._handle_error("write", key, e)
            return False
        return True

    async def delete(self, key: str) -> bool:
        client = await self._client()
        if client is None:
            return False
        try:
            await client.delete(key)
        except Exception as e:
            # A missed invalidation leaves stale settings until the TTL expires
            logger.warning(f"Cache invalidation failed for {key}: {e}")
            if isinstance(e, _CONNECTION_ERRORS):
                self._back_off(e)
            return False
        return True

    def negotiation_settings_key(self, tenant_id: str) -> str:
        return f"negotiation:settings:{tenant_id}"

    async def get_negotiation_settings(self, tenant_id: str) -> dict | None:
        return await self.get(self.negotiation_settings_key(tenant_id))

    async def set_negotiation_settings(self, tenant_id: str, data: dict):
        await self.set(self.negotiation_settings_key(tenant_id), data)

    async def invalidate_negotiation_settings(self, tenant_id: str):
        await self.delete(self.negotiation_settings_key(tenant_id))

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
