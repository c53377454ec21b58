from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import Settings
from .logging_config import logger

MISSING_PLACEHOLDER = "_"
PRESENT_MARKER = "="
MEMORY_CACHE_MAX_ENTRIES = 10_000
MEMORY_CACHE_SWEEP_EVERY = 256


@dataclass
class CacheResult:
    value: Any
    hit: bool


def _key_part(value: str | None) -> str:
    # present values never equal the placeholder and never contain a raw ":"
    if not value:
        return MISSING_PLACEHOLDER
    return PRESENT_MARKER + quote(value, safe="")


def build_cache_key(prefix: str, route: str, *values: str | None) -> str:
    parts = [prefix, route]
    parts.extend(_key_part(value) for value in values)
    return ":".join(parts)


class MemoryCache:
    """In-process TTL store, bounded to ``max_entries`` keys.

    Expired entries are swept every ``sweep_every`` writes and whenever the
    store is full; if it is still full after a sweep the oldest key goes.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = MEMORY_CACHE_MAX_ENTRIES,
        sweep_every: int = MEMORY_CACHE_SWEEP_EVERY,
    ) -> None:
        self._store: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._max_entries = max_entries
        self._sweep_every = sweep_every
        self._writes = 0

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            payload, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                self._store.pop(key, None)
                return None
            return payload

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        async with self._lock:
            self._writes += 1
            if self._writes % self._sweep_every == 0 or (
                key not in self._store and len(self._store) >= self._max_entries
            ):
                self._purge_expired()
            self._store.pop(key, None)
            while len(self._store) >= self._max_entries:
                self._store.pop(next(iter(self._store)))
            expires_at = self._clock() + ex if ex else None
            self._store[key] = (value, expires_at)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._store.items() if expires_at is not None and expires_at <= now]
        for key in expired:
            del self._store[key]


class CacheProvider:
    """Key/value store behind the cache-aside helper.

    ``backend`` is one of ``none`` (caching disabled), ``memory`` or ``redis``.
    A Redis backend that cannot be reached, at startup or per call, degrades
    to the in-process cache.
    """

    def __init__(self, backend: str = "none", redis_url: str | None = None, redis: Redis | None = None) -> None:
        self.backend = backend
        self._redis_url = redis_url
        self._redis = redis
        self._fallback = MemoryCache()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheProvider":
        return cls(backend=settings.cache_backend, redis_url=settings.resolved_redis_url())

    @property
    def enabled(self) -> bool:
        return self.backend != "none"

    async def init(self) -> None:
        if self.backend != "redis":
            return
        if self._redis is None:
            self._redis = Redis.from_url(self._redis_url or "redis://localhost:6379/0", encoding="utf-8", decode_responses=True)
        try:
            await self._redis.ping()
        except (RedisError, OSError) as exc:
            logger.warning("cache.redis_unavailable", url=self._redis_url, error=str(exc))
            await self._close_redis()

    async def get(self, key: str) -> str | None:
        if self._redis is not None:
            try:
                return await self._redis.get(key)
            except RedisError as exc:
                logger.warning("cache.redis_error", op="get", key=key, error=str(exc))
        return await self._fallback.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        if self._redis is not None:
            try:
                await self._redis.set(key, value, ex=ex)
                return
            except RedisError as exc:
                logger.warning("cache.redis_error", op="set", key=key, error=str(exc))
        await self._fallback.set(key, value, ex)

    async def close(self) -> None:
        await self._close_redis()
        await self._fallback.clear()

    async def _close_redis(self) -> None:
        if self._redis is None:
            return
        redis, self._redis = self._redis, None
        await redis.aclose()


async def get_from_cache_first(
    cache: CacheProvider,
    key: str,
    producer: Callable[[], Awaitable[Any]],
    ttl: int,
) -> CacheResult:
    if not cache.enabled:
        return CacheResult(value=await producer(), hit=False)
    cached = await cache.get(key)
    if cached is not None:
        logger.debug("cache.hit", key=key)
        return CacheResult(value=json.loads(cached), hit=True)
    logger.debug("cache.miss", key=key, ttl=ttl)
    value = await producer()
    await cache.set(key, json.dumps(value), ex=ttl)
    return CacheResult(value=value, hit=False)
