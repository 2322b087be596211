"""Parse Google Flights JS-embedded data into Journey objects."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from google.protobuf.message import DecodeError as ProtobufDecodeError
from selectolax.lexbor import LexborHTMLParser  # type: ignore[import-untyped]

from sky_flights.exceptions import DecodeError, ProtocolError
from sky_flights.schemas import Airline, Airport, Flight, Journey

from .proto import flights as PB  # noqa: N812

logger = logging.getLogger(__name__)

SCRIPT_SELECTOR = 'script[class="ds:1"]'
_DATA_START = "data:["
_DATA_END = "], sideChannel"
# Google double-encodes the summary string, so its padding arrives escaped
_ESCAPED_EQUALS = "\\u003d"

# ---------------------------------------------------------------------------
# Nested-list decoder infrastructure
# ---------------------------------------------------------------------------

DecodePath = list[int]
type NLBaseType = int | str | None | Sequence[NLBaseType]


@dataclass
class NLData(Sequence[NLBaseType]):
    data: list[NLBaseType]

    def __getitem__(self, decode_path: int | DecodePath) -> NLBaseType:  # type: ignore[override]
        """Follow ``decode_path``; a path that runs off the data yields None."""
        if isinstance(decode_path, int):
            return self.data[decode_path]
        it: Any = self.data
        for index in decode_path:
            if not isinstance(it, list) or index >= len(it):
                return None
            it = it[index]
        return it

    def __len__(self) -> int:
        return len(self.data)


@dataclass
class DecoderKey[V]:
    decode_path: DecodePath
    decoder: Callable[[NLData], V] | None = None

    def decode(self, root: NLData) -> NLBaseType | V:
        data = root[self.decode_path]
        if isinstance(data, list) and self.decoder:
            return self.decoder(NLData(data))
        return data


class Decoder:
    @classmethod
    def decode_el(cls, el: NLData) -> Mapping[str, Any]:
        decoded: dict[str, Any] = {}
        for field_name, key_decoder in vars(cls).items():
            if isinstance(key_decoder, DecoderKey):
                decoded[field_name.lower()] = key_decoder.decode(el)
        return decoded

    @classmethod
    def decode(cls, root: list[Any] | NLData) -> Any:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Raw flight rows
# ---------------------------------------------------------------------------


@dataclass
class RawFlight:
    operator: str | None
    departure_airport: str | None
    departure_airport_name: str | None
    arrival_airport_name: str | None
    arrival_airport: str | None
    airline: str | None
    flight_number: str | int | None
    airline_name: str | None


class RawFlightDecoder(Decoder):
    OPERATOR: DecoderKey[str] = DecoderKey([2])
    DEPARTURE_AIRPORT: DecoderKey[str] = DecoderKey([3])
    DEPARTURE_AIRPORT_NAME: DecoderKey[str] = DecoderKey([4])
    ARRIVAL_AIRPORT_NAME: DecoderKey[str] = DecoderKey([5])
    ARRIVAL_AIRPORT: DecoderKey[str] = DecoderKey([6])
    AIRLINE: DecoderKey[str] = DecoderKey([22, 0])
    FLIGHT_NUMBER: DecoderKey[str] = DecoderKey([22, 1])
    AIRLINE_NAME: DecoderKey[str] = DecoderKey([22, 3])

    @classmethod
    def decode(cls, root: list[Any] | NLData) -> list[RawFlight]:  # type: ignore[override]
        return [RawFlight(**cls.decode_el(NLData(el))) for el in root]  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Embedded protobuf payloads
# ---------------------------------------------------------------------------


def _b64decode(payload: str) -> bytes:
    """Decode base64 that may carry surplus or missing ``=`` padding."""
    stripped = payload.strip().rstrip("=")
    return base64.b64decode(stripped + "=" * (-len(stripped) % 4))


def _decode_flight_summary(raw: object) -> list[Any]:
    """Per-flight timing entries from the quoted summary literal."""
    msg = "Unable to decode flight summary"
    if not isinstance(raw, str):
        raise DecodeError(msg)
    start = raw.find('"')
    if start == -1:
        raise DecodeError(msg)
    start += 1
    end = raw.find('"', start)
    if end == -1:
        raise DecodeError(msg)

    payload = raw[start:end].replace(_ESCAPED_EQUALS, "=")
    summary = PB.FlightSummary()
    try:
        summary.ParseFromString(_b64decode(payload))
    except (binascii.Error, ProtobufDecodeError) as exc:
        raise DecodeError(msg) from exc
    return list(summary.itinerary.sector.flight)


def _decode_price(raw: object) -> tuple[int, str]:
    msg = "Unable to parse flight price"
    if not isinstance(raw, str):
        raise DecodeError(msg)
    summary = PB.ItinerarySummary()
    try:
        summary.ParseFromString(_b64decode(raw))
    except (binascii.Error, ProtobufDecodeError) as exc:
        raise DecodeError(msg) from exc
    if not summary.HasField("price"):
        raise DecodeError(msg)
    return summary.price.price, summary.price.currency


def _build_flight(raw: RawFlight, timing: Any) -> Flight:
    try:
        airline = Airline(code=raw.airline, name=raw.airline_name or "")  # type: ignore[arg-type]
        return Flight(
            origin=Airport(
                code=raw.departure_airport,  # type: ignore[arg-type]
                name=raw.departure_airport_name or "",
            ),
            destination=Airport(
                code=raw.arrival_airport,  # type: ignore[arg-type]
                name=raw.arrival_airport_name or "",
            ),
            airline=airline,
            number="" if raw.flight_number is None else str(raw.flight_number),
            operator=raw.operator if raw.operator is not None else airline.name,
            departure=datetime.fromisoformat(timing.departure),
            arrival=datetime.fromisoformat(timing.arrival),
        )
    except (TypeError, ValueError) as exc:
        msg = f"Unable to parse flights: {exc}"
        raise DecodeError(msg) from exc


class JourneyDecoder(Decoder):
    FLIGHTS: DecoderKey[list[RawFlight]] = DecoderKey([0, 2], RawFlightDecoder.decode)
    ITINERARY_SUMMARY: DecoderKey[str] = DecoderKey([1, 1])
    FLIGHT_SUMMARY: DecoderKey[str] = DecoderKey([8])

    @classmethod
    def decode(cls, root: list[Any] | NLData) -> Journey:  # type: ignore[override]
        if isinstance(root, NLData):
            root = root.data
        if not isinstance(root, list):
            msg = f"Journey record is not an array: {type(root).__name__}"
            raise DecodeError(msg)

        el = cls.decode_el(NLData(root))
        raw_flights: list[RawFlight] = el["flights"] or []
        if not isinstance(raw_flights, list):
            msg = "Unable to parse flights"
            raise DecodeError(msg)

        timings = _decode_flight_summary(el["flight_summary"])
        if len(timings) < len(raw_flights):
            msg = "Unable to parse flight summary"
            raise DecodeError(msg)

        flights = [
            _build_flight(raw, timing)
            for raw, timing in zip(raw_flights, timings, strict=False)
        ]
        if not flights:
            msg = "Unable to parse flights"
            raise DecodeError(msg)

        price, currency = _decode_price(el["itinerary_summary"])
        return Journey(flights=flights, price=price, currency=currency)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_data(html: str | bytes) -> list[Any]:
    """Isolate the JSON array embedded in the ``ds:1`` inline script."""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")

    logger.debug("Attempting to find script tag in Google response")
    parser = LexborHTMLParser(html)
    script_node = parser.css_first(SCRIPT_SELECTOR)
    if script_node is None:
        msg = "Unable to find script tag in Google response"
        raise ProtocolError(msg)

    script_text = script_node.text()
    start = script_text.find(_DATA_START)
    if start == -1:
        msg = "Unable to find data start in Google response"
        raise ProtocolError(msg)
    # Keep the opening bracket
    start += len(_DATA_START) - 1
    logger.debug("Found data start at %d", start)

    end = script_text.find(_DATA_END, start)
    if end == -1:
        msg = "Unable to find data end in Google response"
        raise ProtocolError(msg)
    end += 1
    logger.debug("Found data end at %d", end)

    try:
        data = json.loads(script_text[start:end])
    except json.JSONDecodeError as exc:
        msg = f"JSON response did not decode to an array: {exc}"
        raise DecodeError(msg) from exc
    if not isinstance(data, list):
        msg = f"JSON response did not decode to an array: got {type(data).__name__}"
        raise DecodeError(msg)
    return data


def journey_records(data: list[Any]) -> list[Any]:
    """Raw per-journey records; absent when Google found nothing."""
    records = NLData(data)[[3, 0]]
    return records if isinstance(records, list) else []


def parse_journeys(html: str | bytes) -> list[Journey]:
    """Extract and decode every journey offered on a results page.

    Steps:
    1. Isolate the JSON array from the ``ds:1`` script
    2. Walk the journey records at ``[3][0]``
    3. Decode each record and its embedded protobuf summaries
    """
    records = journey_records(extract_data(html))
    journeys = [JourneyDecoder.decode(record) for record in records]
    logger.info("JS parser extracted %d journeys", len(journeys))
    return journeys
