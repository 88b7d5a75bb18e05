"""
org_services.cache

Pass-through response caches for the `/api/v2` routes.

Responsibilities:
- Namespaced get/set/evict over JSON-serializable values.
- `get_or_load`: read-through helper with an `unless` predicate so empty or
  missing results are never cached.
- Two backends: per-process memory (default) and Redis (`redis.asyncio`).
"""

from __future__ import annotations

import abc
import json
import time
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from org_services.observability.logging import get_logger
from org_services.settings import Settings

log = get_logger(__name__)


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, dict)) and not value)


class Cache(abc.ABC):
    @abc.abstractmethod
    async def get(self, namespace: str, key: str) -> Any | None: ...

    @abc.abstractmethod
    async def set(self, namespace: str, key: str, value: Any) -> None: ...

    @abc.abstractmethod
    async def evict(self, namespace: str, key: str) -> None: ...

    @abc.abstractmethod
    async def evict_all(self, *namespaces: str) -> None: ...

    async def close(self) -> None:
        return None

    async def get_or_load(
        self,
        namespace: str,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        *,
        unless: Callable[[Any], bool] = is_empty,
    ) -> Any:
        cached = await self.get(namespace, key)
        if cached is not None:
            log.debug("cache_hit", namespace=namespace, key=key)
            return cached
        value = await loader()
        if not unless(value):
            await self.set(namespace, key, value)
        return value


class MemoryCache(Cache):
    def __init__(self, *, ttl_seconds: float | None = None) -> None:
        self._ttl = ttl_seconds
        # namespace -> key -> (expires_at | None, value)
        self._data: dict[str, dict[str, tuple[float | None, Any]]] = {}

    async def get(self, namespace: str, key: str) -> Any | None:
        entry = self._data.get(namespace, {}).get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._data[namespace].pop(key, None)
            return None
        return value

    async def set(self, namespace: str, key: str, value: Any) -> None:
        expires_at = time.monotonic() + self._ttl if self._ttl else None
        self._data.setdefault(namespace, {})[key] = (expires_at, value)

    async def evict(self, namespace: str, key: str) -> None:
        self._data.get(namespace, {}).pop(key, None)

    async def evict_all(self, *namespaces: str) -> None:
        for ns in namespaces:
            self._data.pop(ns, None)


class RedisCache(Cache):
    def __init__(self, client: redis.Redis, *, prefix: str, ttl_seconds: float | None = None) -> None:
        self._redis = client
        self._prefix = prefix
        self._ttl = ttl_seconds

    def _key(self, namespace: str, key: str) -> str:
        return f"{self._prefix}:{namespace}:{key}"

    async def get(self, namespace: str, key: str) -> Any | None:
        raw = await self._redis.get(self._key(namespace, key))
        return None if raw is None else json.loads(raw)

    async def set(self, namespace: str, key: str, value: Any) -> None:
        await self._redis.set(self._key(namespace, key), json.dumps(value), ex=self._ttl or None)

    async def evict(self, namespace: str, key: str) -> None:
        await self._redis.delete(self._key(namespace, key))

    async def evict_all(self, *namespaces: str) -> None:
        for ns in namespaces:
            keys = [k async for k in self._redis.scan_iter(match=self._key(ns, "*"))]
            if keys:
                await self._redis.delete(*keys)

    async def close(self) -> None:
        await self._redis.aclose()


def build_cache(settings: Settings) -> Cache:
    if settings.cache_backend == "redis":
        client = redis.from_url(settings.redis_url, decode_responses=True)
        return RedisCache(client, prefix=settings.cache_prefix, ttl_seconds=settings.cache_ttl_seconds)
    return MemoryCache(ttl_seconds=settings.cache_ttl_seconds)


# --- Module Notes -----------------------------------------------------------
# Values are stored in their JSON (by-alias) form so both backends return the same
# shape; response models re-validate them on the way out.
