"""In-process response cache with per-entry expiry."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from sky_flights.base import BaseCache

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: str
    expires_at: float | None


class MemoryCache(BaseCache):
    """Dictionary-backed cache, shared safely between concurrent branches."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at < self._clock():
            del self._entries[key]
            return None
        return entry

    async def has(self, key: str) -> bool:
        async with self._lock:
            return self._live(key) is not None

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._live(key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        async with self._lock:
            self._entries[key] = _Entry(value, expires_at)
        logger.debug("MemoryCache stored %s (ttl=%s)", key, ttl)

    def __len__(self) -> int:
        return len(self._entries)
