"""Flight search service: wires settings, transport and cache together."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sky_flights.cache.cache_keys import request_key
from sky_flights.cache.memory import MemoryCache
from sky_flights.cache.redis_client import RedisCache
from sky_flights.config import FlightSettings
from sky_flights.config import settings as default_settings
from sky_flights.exceptions import MissingCollaboratorError, ProtocolError
from sky_flights.google.cookie_manager import CookieManager
from sky_flights.google.fetcher import HttpxTransport, PrimpTransport
from sky_flights.google.resolver import ItineraryResolver
from sky_flights.schemas import FlightSearch

if TYPE_CHECKING:
    from sky_flights.base import BaseCache, BaseTransport
    from sky_flights.schemas import Itinerary

logger = logging.getLogger(__name__)


class FlightService:
    """Entry point for searches.

    The transport and cache are injected; :meth:`from_settings` builds them
    from configuration. A service without a transport can still answer from
    its cache, but any request that misses raises
    :class:`MissingCollaboratorError`.
    """

    def __init__(
        self,
        settings: FlightSettings | None = None,
        *,
        transport: BaseTransport | None = None,
        cache: BaseCache | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.transport = transport
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: FlightSettings | None = None) -> FlightService:
        settings = settings or default_settings

        transport: BaseTransport
        if settings.transport == "primp":
            transport = PrimpTransport(
                timeout=settings.timeout, proxy_url=settings.proxy_url
            )
        else:
            transport = HttpxTransport(
                timeout=settings.timeout,
                proxy_url=settings.proxy_url,
                max_retries=settings.max_retries,
            )

        cache: BaseCache | None = None
        if settings.cache_backend == "memory":
            cache = MemoryCache()
        elif settings.cache_backend == "redis":
            cache = RedisCache.from_url(settings.redis_url)

        logger.debug(
            "FlightService using %s transport, %s cache",
            settings.transport,
            settings.cache_backend,
        )
        return cls(settings, transport=transport, cache=cache)

    def query(self) -> FlightSearch:
        """A blank search carrying the configured currency and language."""
        return FlightSearch(
            currency=self.settings.default_currency,
            language=self.settings.language,
        )

    def request_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Cookie": CookieManager.header(self.settings.cookies),
        }

    async def fetch(self, url: str, *, use_cache: bool = True) -> str:
        """GET ``url`` and return the body, going through the cache if allowed."""
        headers = self.request_headers()
        key = request_key("GET", url, headers, prefix=self.settings.cache_prefix)

        if use_cache and self.cache is not None and await self.cache.has(key):
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", url)
                return cached

        if self.transport is None:
            msg = "No HTTP transport has been provided"
            raise MissingCollaboratorError(msg)

        response = await self.transport.fetch("GET", url, headers)
        logger.info("GET %s => %d %s", url, response.status_code, response.reason)
        if response.status_code != 200:
            msg = (
                "HTTP request to Google Flights failed: "
                f"[{response.status_code}] {response.reason}"
            )
            raise ProtocolError(
                msg, status_code=response.status_code, reason=response.reason
            )

        if self.cache is not None:
            try:
                await self.cache.set(key, response.text, self.settings.cache_ttl)
            except Exception:
                logger.warning("Failed to cache response for %s", url, exc_info=True)

        return response.text

    async def search(self, search: FlightSearch) -> list[Itinerary]:
        """Resolve every segment of ``search`` into sorted itineraries."""
        resolver = ItineraryResolver(
            self, max_concurrency=self.settings.max_concurrency
        )
        return await resolver.resolve(search)

    async def close(self) -> None:
        if self.transport is not None:
            await self.transport.close()
        if self.cache is not None:
            await self.cache.close()

    async def __aenter__(self) -> FlightService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
