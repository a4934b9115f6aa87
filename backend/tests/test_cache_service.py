"""
Tests for the redis settings cache: hits, misses and back-off after outages.
"""

import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from locai.config import settings
from locai.services import cache_service as cache_module
from locai.services.cache_service import CacheService


class FakeRedis:
    """Dict-backed stand-in for redis.asyncio.Redis."""

    def __init__(self, down: bool = False):
        self.down = down
        self.store: dict[str, str] = {}
        self.closed = False

    async def ping(self):
        if self.down:
            raise RedisConnectionError("connection refused")
        return True

    async def get(self, key):
        if self.down:
            raise RedisConnectionError("connection reset")
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value

    async def delete(self, key):
        self.store.pop(key, None)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def connect(monkeypatch):
    """Route redis.from_url to FakeRedis clients and record every connection attempt."""
    monkeypatch.setattr(settings, "cache_enabled", True)
    monkeypatch.setattr(settings, "cache_retry_seconds", 60)
    attempts = []

    def install(down: bool = False):
        def from_url(url, **kwargs):
            client = FakeRedis(down=down)
            attempts.append(client)
            return client

        monkeypatch.setattr(cache_module.redis, "from_url", from_url)
        return attempts

    return install


class TestCacheService:

    def test_round_trip(self, connect):
        connect()
        cache = CacheService()

        assert asyncio.run(cache.set_negotiation_settings("tenant-1", {"data": {}, "isDefault": True}))
        assert asyncio.run(cache.get_negotiation_settings("tenant-1")) == {"data": {}, "isDefault": True}

        asyncio.run(cache.invalidate_negotiation_settings("tenant-1"))
        assert asyncio.run(cache.get_negotiation_settings("tenant-1")) is None

    def test_disabled_cache_never_connects(self, connect, monkeypatch):
        attempts = connect()
        monkeypatch.setattr(settings, "cache_enabled", False)

        assert asyncio.run(CacheService().get("any")) is None
        assert attempts == []

    def test_unreachable_redis_backs_off(self, connect):
        attempts = connect(down=True)
        cache = CacheService()

        assert asyncio.run(cache.get("negotiation:settings:tenant-1")) is None
        assert asyncio.run(cache.get("negotiation:settings:tenant-1")) is None
        assert asyncio.run(cache.set("negotiation:settings:tenant-1", {})) is False

        assert len(attempts) == 1
        assert attempts[0].closed is True

    def test_reconnects_after_back_off_window(self, connect, monkeypatch):
        attempts = connect(down=True)
        monkeypatch.setattr(settings, "cache_retry_seconds", 0)
        cache = CacheService()

        asyncio.run(cache.get("key"))
        asyncio.run(cache.get("key"))

        assert len(attempts) == 2

    def test_dropped_connection_backs_off(self, connect):
        attempts = connect()
        cache = CacheService()
        asyncio.run(cache.set("key", {"a": 1}))

        attempts[0].down = True
        assert asyncio.run(cache.get("key")) is None
        assert asyncio.run(cache.get("key")) is None

        assert len(attempts) == 1

    def test_non_json_entry_is_a_miss(self, connect):
        attempts = connect()
        cache = CacheService()
        asyncio.run(cache.set("key", 1))
        attempts[0].store["key"] = "not json {"

        assert asyncio.run(cache.get("key")) is None
