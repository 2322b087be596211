"""Abstract collaborators injected into the flight service."""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class HttpResponse:
    """What the service needs back from a transport."""

    status_code: int
    reason: str
    text: str


class BaseTransport(abc.ABC):
    """Executes HTTP requests. Timeouts and cancellation live here."""

    @abc.abstractmethod
    async def fetch(
        self, method: str, url: str, headers: Mapping[str, str]
    ) -> HttpResponse:
        """Perform the request and return status, reason and body text."""

    async def close(self) -> None:
        """Release any held resources (HTTP clients, etc.)."""


class BaseCache(abc.ABC):
    """Key/value store for response bodies. Must tolerate concurrent use."""

    @abc.abstractmethod
    async def has(self, key: str) -> bool:
        """Return True if a live entry exists for ``key``."""

    @abc.abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the cached body, or None."""

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store ``value`` for ``ttl`` seconds (forever when None)."""

    async def close(self) -> None:
        """Release any held resources."""
