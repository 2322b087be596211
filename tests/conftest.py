"""Shared fixtures: recorded-style Google Flights pages and a spy transport."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from sky_flights.base import BaseTransport, HttpResponse
from sky_flights.cache.memory import MemoryCache
from sky_flights.config import FlightSettings
from sky_flights.google.proto import flights as PB  # noqa: N812
from sky_flights.service import FlightService

# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FixtureFlight:
    airline: str
    number: str
    origin: str
    destination: str
    departure: str
    arrival: str
    airline_name: str = ""
    operator: str | None = None


def raw_flight(flight: FixtureFlight) -> list[Any]:
    """A flight row laid out the way the results page ships it."""
    row: list[Any] = [None] * 23
    row[2] = flight.operator
    row[3] = flight.origin
    row[4] = f"{flight.origin} Airport"
    row[5] = f"{flight.destination} Airport"
    row[6] = flight.destination
    row[22] = [flight.airline, flight.number, None, flight.airline_name]
    return row


def flight_summary(flights: list[FixtureFlight]) -> str:
    summary = PB.FlightSummary()
    for flight in flights:
        summary.itinerary.sector.flight.add(
            number=int(flight.number),
            departure=flight.departure,
            arrival=flight.arrival,
        )
    payload = base64.b64encode(summary.SerializeToString()).decode("ascii")
    return '[null,"{}"]'.format(payload.replace("=", "\\u003d"))


def itinerary_summary(price: int, currency: str = "GBP") -> str:
    summary = PB.ItinerarySummary(
        flights="fixture", price=PB.Price(price=price, currency=currency)
    )
    return base64.b64encode(summary.SerializeToString()).decode("ascii")


def journey_record(
    flights: list[FixtureFlight], price: int, currency: str = "GBP"
) -> list[Any]:
    record: list[Any] = [None] * 9
    record[0] = [None, None, [raw_flight(flight) for flight in flights]]
    record[1] = [None, itinerary_summary(price, currency)]
    record[8] = flight_summary(flights)
    return record


def results_page(records: list[list[Any]]) -> str:
    data = [None, None, None, [records] if records else None]
    return (
        "<!doctype html><html><head><title>Google Flights</title></head><body>"
        '<script class="ds:1" nonce="n0nc3">'
        "AF_initDataCallback({key: 'ds:1', hash: '2', "
        f"data:{json.dumps(data)}, sideChannel: {{}}}});"
        "</script></body></html>"
    )


def decode_tfs(url: str) -> Any:
    """Parse the ``tfs`` parameter of a request URL back into ``Info``."""
    tfs = parse_qs(urlsplit(url).query)["tfs"][0]
    info = PB.Info()
    info.ParseFromString(base64.b64decode(tfs.replace("_", "/")))
    return info


def context_numbers(url: str) -> list[str]:
    """Flight numbers sent as continuation context, across all segments."""
    info = decode_tfs(url)
    return [item.flight_number for data in info.data for item in data.itin_data]


# ---------------------------------------------------------------------------
# Recorded LGW <-> FAO results
# ---------------------------------------------------------------------------

BA2662 = FixtureFlight(
    "BA", "2662", "LGW", "FAO", "2025-12-16T06:00:00", "2025-12-16T08:55:00",
    "British Airways",
)
U28161 = FixtureFlight(
    "U2", "8161", "LGW", "FAO", "2025-12-16T07:10:00", "2025-12-16T10:00:00",
    "easyJet",
)
FR8311 = FixtureFlight(
    "FR", "8311", "LGW", "FAO", "2025-12-16T13:25:00", "2025-12-16T16:15:00",
    "Ryanair",
)
TP1331 = FixtureFlight(
    "TP", "1331", "LGW", "LIS", "2025-12-16T10:00:00", "2025-12-16T12:45:00",
    "TAP Air Portugal",
)
TP1901 = FixtureFlight(
    "TP", "1901", "LIS", "FAO", "2025-12-16T14:00:00", "2025-12-16T14:45:00",
    "TAP Air Portugal", "TAP Express",
)
W95701 = FixtureFlight(
    "W9", "5701", "LGW", "FAO", "2025-12-16T18:30:00", "2025-12-16T21:20:00",
    "Wizz Air UK",
)
BA2663 = FixtureFlight(
    "BA", "2663", "FAO", "LGW", "2025-12-23T09:55:00", "2025-12-23T12:40:00",
    "British Airways",
)
U28162 = FixtureFlight(
    "U2", "8162", "FAO", "LGW", "2025-12-23T10:40:00", "2025-12-23T13:25:00",
    "easyJet",
)

OUTBOUND_RECORDS = [
    journey_record([BA2662], 8900),
    journey_record([U28161], 4599),
    journey_record([FR8311], 5250),
    journey_record([TP1331, TP1901], 6500),
    journey_record([W95701], 7120),
]


# ---------------------------------------------------------------------------
# Transport spy and service factory
# ---------------------------------------------------------------------------


class SpyTransport(BaseTransport):
    """Answers requests from ``responder`` and records every call."""

    def __init__(self, responder: Callable[[str], HttpResponse | str]) -> None:
        self.responder = responder
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self.closed = False

    async def fetch(
        self, method: str, url: str, headers: Mapping[str, str]
    ) -> HttpResponse:
        self.calls.append((method, url, dict(headers)))
        result = self.responder(url)
        if isinstance(result, str):
            return HttpResponse(status_code=200, reason="OK", text=result)
        return result

    async def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [url for _, url, _ in self.calls]


@pytest.fixture
def flight_settings() -> FlightSettings:
    return FlightSettings(
        _env_file=None,  # type: ignore[call-arg]
        default_currency="GBP",
        language="en-GB",
        cache_backend="memory",
        max_concurrency=1,
    )


@pytest.fixture
def make_service(flight_settings: FlightSettings):
    """Factory fixture: a FlightService wired to a SpyTransport."""

    def _make(
        responder: Callable[[str], HttpResponse | str],
        *,
        cache: Any = None,
        **overrides: Any,
    ) -> tuple[FlightService, SpyTransport]:
        settings = flight_settings.model_copy(update=overrides)
        spy = SpyTransport(responder)
        service = FlightService(
            settings,
            transport=spy,
            cache=cache if cache is not None else MemoryCache(),
        )
        return service, spy

    return _make
