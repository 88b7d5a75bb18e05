"""
org_services.services.idempotency

Replay store for idempotent creation requests.

Responsibilities:
- Remember the result of a creation under the client's `Idempotency-Key`.
- Bound memory: LRU eviction past `max_entries`, expiry after `ttl_seconds`.
- Serialize concurrent requests that share a key, so the later one replays.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any


def normalize_key(key: str | None) -> str | None:
    if key is None or not key.strip():
        return None
    return key.strip()


class IdempotencyStore:
    """
    Per-process only: two replicas will not see each other's keys.
    """

    def __init__(self, *, max_entries: int = 10_000, ttl_seconds: float = 24 * 60 * 60) -> None:
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = asyncio.Lock()
        self._claims: dict[str, tuple[asyncio.Lock, list[int]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str | None) -> Any | None:
        key = normalize_key(key)
        if key is None:
            return None
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if time.monotonic() - stored_at > self._ttl:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    async def put(self, key: str | None, value: Any) -> None:
        key = normalize_key(key)
        if key is None:
            return
        async with self._lock:
            self._entries[key] = (time.monotonic(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    @asynccontextmanager
    async def claim(self, key: str | None) -> AsyncIterator[None]:
        """
        Hold the key for a whole lookup/create/put sequence.

        Requests without a usable key are never serialized.
        """
        key = normalize_key(key)
        if key is None:
            yield
            return
        lock, holders = self._claims.setdefault(key, (asyncio.Lock(), [0]))
        holders[0] += 1
        try:
            async with lock:
                yield
        finally:
            holders[0] -= 1
            if holders[0] == 0:
                del self._claims[key]
