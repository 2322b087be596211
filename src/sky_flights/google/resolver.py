"""Resolve multi-segment searches leg by leg into complete itineraries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from sky_flights.exceptions import MissingCollaboratorError
from sky_flights.schemas import FlightSearch, Itinerary, Journey, SortOrder

from .fetcher import GOOGLE_FLIGHTS_URL
from .js_parser import parse_journeys
from .protobuf_builder import (
    SelectedFlight,
    TFSData,
    check_segment_count,
    continuation_context,
    sort_order_code,
)

if TYPE_CHECKING:
    from sky_flights.service import FlightService

logger = logging.getLogger(__name__)

_SORT_KEYS: dict[SortOrder, Callable[[Itinerary], Any]] = {
    SortOrder.BEST: lambda it: (it.outbound.stops, it.price),
    SortOrder.PRICE: lambda it: it.price,
    SortOrder.DURATION: lambda it: it.outbound.duration,
    SortOrder.DEPARTURE_TIME: lambda it: it.outbound.departure,
}


def sort_itineraries(
    itineraries: Sequence[Itinerary], sort_order: SortOrder
) -> list[Itinerary]:
    """Stable sort, so equal keys keep the order Google returned them in."""
    return sorted(itineraries, key=_SORT_KEYS[sort_order])


def search_url(
    search: FlightSearch, context: Sequence[SelectedFlight] = ()
) -> str:
    """Results page URL for ``search`` given the flights chosen so far."""
    tfs = TFSData.from_search(search, context)
    params = {
        "curr": search.currency,
        "hl": search.language,
        "tfu": sort_order_code(search.sort_order),
        "tfs": tfs.as_b64().decode("utf-8"),
    }
    return f"{GOOGLE_FLIGHTS_URL}?{urlencode(params)}"


class ItineraryResolver:
    """Turns a :class:`FlightSearch` into sorted, complete itineraries.

    Google only offers return legs once the outbound flights are known, so
    segment 0 is searched on its own and every later segment is searched once
    per partial itinerary, with that itinerary's flights sent as context.
    Branches of one round run concurrently, at most ``max_concurrency`` at a
    time. The first failing fetch aborts the whole search and cancels the
    branches still pending.
    """

    def __init__(
        self, service: FlightService | None, *, max_concurrency: int = 1
    ) -> None:
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self._service = service
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def resolve(self, search: FlightSearch) -> list[Itinerary]:
        check_segment_count(search.segments)
        # Raises on multi-city before anything is fetched
        TFSData.from_search(search)
        service = self._service
        if service is None:
            msg = "No flight service has been provided"
            raise MissingCollaboratorError(msg)

        journeys = await self._fetch_journeys(service, search)
        itineraries = [
            Itinerary(default_currency=search.currency).add_journey(journey)
            for journey in journeys
        ]
        logger.debug("Segment 0 resolved to %d itineraries", len(itineraries))

        for index in range(1, len(search.segments)):
            itineraries = await self._continue_all(service, search, itineraries)
            logger.debug(
                "Segment %d resolved to %d itineraries", index, len(itineraries)
            )

        expected = len(search.segments)
        complete = [it for it in itineraries if len(it.journeys) == expected]
        return sort_itineraries(complete, search.sort_order)

    async def _continue_all(
        self,
        service: FlightService,
        search: FlightSearch,
        itineraries: Sequence[Itinerary],
    ) -> list[Itinerary]:
        """Run one round of branches; a failing branch cancels the rest."""
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self._continue(service, search, itinerary))
                    for itinerary in itineraries
                ]
        except ExceptionGroup as exc_group:
            raise exc_group.exceptions[0] from None
        return [it for task in tasks for it in task.result()]

    async def _continue(
        self, service: FlightService, search: FlightSearch, itinerary: Itinerary
    ) -> list[Itinerary]:
        """Extend one partial itinerary with every continuation on offer."""
        async with self._semaphore:
            candidates = await self._fetch_journeys(
                service, search, continuation_context(itinerary)
            )
        if not candidates:
            logger.debug(
                "No continuations for %s, dropping itinerary",
                ", ".join(flight.code for flight in itinerary.flights),
            )
            return []
        return [itinerary.clone().add_journey(journey) for journey in candidates]

    @staticmethod
    async def _fetch_journeys(
        service: FlightService,
        search: FlightSearch,
        context: Sequence[SelectedFlight] = (),
    ) -> list[Journey]:
        url = search_url(search, context)
        html = await service.fetch(url, use_cache=search.use_cache)
        return parse_journeys(html)
