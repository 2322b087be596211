"""Build Google Flights protobuf TFS query parameters."""

from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sky_flights.exceptions import SearchError
from sky_flights.schemas import CabinClass, PassengerType, SortOrder, TripType

from .proto import flights as PB  # noqa: N812

if TYPE_CHECKING:
    from sky_flights.schemas import Flight, FlightSearch, Itinerary, Segment

logger = logging.getLogger(__name__)

# Mappings from our enums to protobuf enum values
_CABIN_TO_PB_SEAT: dict[CabinClass, Any] = {
    CabinClass.UNKNOWN: PB.Seat.UNKNOWN_SEAT,
    CabinClass.ECONOMY: PB.Seat.ECONOMY,
    CabinClass.PREMIUM_ECONOMY: PB.Seat.PREMIUM_ECONOMY,
    CabinClass.BUSINESS: PB.Seat.BUSINESS,
    CabinClass.FIRST: PB.Seat.FIRST,
}

_TRIP_TO_PB_TRIP: dict[TripType, Any] = {
    TripType.ROUND_TRIP: PB.Trip.ROUND_TRIP,
    TripType.ONE_WAY: PB.Trip.ONE_WAY,
    TripType.MULTI_CITY: PB.Trip.MULTI_CITY,
}

_PASSENGER_TO_PB: dict[PassengerType, Any] = {
    PassengerType.ADULT: PB.Passenger.ADULT,
    PassengerType.CHILD: PB.Passenger.CHILD,
    PassengerType.INFANT_IN_SEAT: PB.Passenger.INFANT_IN_SEAT,
    PassengerType.INFANT_ON_LAP: PB.Passenger.INFANT_ON_LAP,
}

# Opaque ``?tfu=`` values captured from the results page sort menu
_SORT_ORDER_CODES: dict[SortOrder, str] = {
    SortOrder.BEST: "EgQIARABIgA",
    SortOrder.PRICE: "EgQIAhABIgA",
    SortOrder.DEPARTURE_TIME: "EgQIAxABIgA",
    SortOrder.DURATION: "EgQIBRABIgA",
}

MAX_SEGMENTS = 2


def sort_order_code(sort_order: SortOrder) -> str:
    return _SORT_ORDER_CODES[sort_order]


def check_segment_count(segments: Sequence[Segment]) -> None:
    """Reject searches we cannot encode before any work is done."""
    if not segments:
        msg = "No segments specified"
        raise SearchError(msg)
    if len(segments) > MAX_SEGMENTS:
        msg = "Multi-city trips are not supported"
        raise SearchError(msg)


def classify_trip(segments: Sequence[Segment]) -> TripType:
    """Derive the wire trip type from the segments.

    Two segments form a round trip only when the airport sets mirror each
    other: where the first leg lands is where the second departs, and the
    other way round. Order inside each set does not matter.
    """
    if len(segments) == 1:
        return TripType.ONE_WAY
    if len(segments) == 2:
        outbound, back = segments
        if sorted(outbound.origins) == sorted(back.destinations) and sorted(
            outbound.destinations
        ) == sorted(back.origins):
            return TripType.ROUND_TRIP
    return TripType.MULTI_CITY


class SelectedFlight:
    """A flight already chosen on an earlier leg, sent back as context."""

    __slots__ = ("airline", "date", "flight_number", "from_airport", "to_airport")

    def __init__(
        self,
        *,
        from_airport: str,
        to_airport: str,
        date: str,
        airline: str,
        flight_number: str,
    ) -> None:
        self.from_airport = from_airport
        self.to_airport = to_airport
        self.date = date
        self.airline = airline
        self.flight_number = flight_number

    @classmethod
    def from_flight(cls, flight: Flight) -> SelectedFlight:
        return cls(
            from_airport=flight.origin.code,
            to_airport=flight.destination.code,
            date=flight.departure.strftime("%Y-%m-%d"),
            airline=flight.airline.code,
            flight_number=flight.number,
        )

    def attach(self, data: Any) -> None:
        data.itin_data.add(
            departure_airport=self.from_airport,
            departure_date=self.date,
            arrival_airport=self.to_airport,
            flight_code=self.airline,
            flight_number=self.flight_number,
        )


def continuation_context(itinerary: Itinerary) -> list[SelectedFlight]:
    """Every flight of a partial itinerary, in travel order."""
    return [SelectedFlight.from_flight(flight) for flight in itinerary.flights]


class FlightData:
    """A single leg of a flight query (origins -> destinations on a date)."""

    __slots__ = ("airlines", "date", "from_airports", "max_stops", "to_airports")

    # Airport records carry this flag to match any airport with the code
    ANY_AIRPORT_FLAG = -1

    def __init__(
        self,
        *,
        date: str,
        from_airports: Sequence[str],
        to_airports: Sequence[str],
        max_stops: int = 0,
        airlines: Sequence[str] = (),
    ) -> None:
        self.date = date
        self.from_airports = list(from_airports)
        self.to_airports = list(to_airports)
        self.max_stops = max_stops
        self.airlines = list(airlines)

    @classmethod
    def from_segment(cls, segment: Segment) -> FlightData:
        return cls(
            date=segment.date.strftime("%Y-%m-%d"),
            from_airports=segment.origins,
            to_airports=segment.destinations,
            max_stops=segment.max_stops,
            airlines=segment.airlines,
        )

    def attach(self, info: Any, selected: Sequence[SelectedFlight] = ()) -> None:
        data = info.data.add()
        for code in self.to_airports:
            data.to_flight.add(airport=code, flag=self.ANY_AIRPORT_FLAG)
        for code in self.from_airports:
            data.from_flight.add(airport=code, flag=self.ANY_AIRPORT_FLAG)
        data.date = self.date
        data.max_stops = self.max_stops
        if self.airlines:
            data.airlines.extend(self.airlines)
        for flight in selected:
            flight.attach(data)


class Passengers:
    """Maps passenger types to the protobuf Passenger enum list."""

    def __init__(self, passengers: Sequence[PassengerType] = ()) -> None:
        self._pb: list[Any] = [_PASSENGER_TO_PB[p] for p in passengers]
        if not self._pb:
            self._pb.append(PB.Passenger.ADULT)

    def attach(self, info: Any) -> None:
        for p in self._pb:
            info.passengers.append(p)


class TFSData:
    """Builds the ``?tfs=`` protobuf parameter for Google Flights."""

    def __init__(
        self,
        *,
        flight_data: list[FlightData],
        seat: Any,
        trip: Any,
        passengers: Passengers,
        context: Sequence[SelectedFlight] = (),
    ) -> None:
        self.flight_data = flight_data
        self.seat = seat
        self.trip = trip
        self.passengers = passengers
        self.context = context

    def _build_pb(self) -> Any:
        info = PB.Info()
        info.seat = self.seat
        info.trip = self.trip
        self.passengers.attach(info)
        for i, fd in enumerate(self.flight_data):
            # Segment i carries the first i + 1 selected flights, if it has one
            selected = self.context[: i + 1] if i < len(self.context) else ()
            fd.attach(info, selected)
        return info

    def to_bytes(self) -> bytes:
        return self._build_pb().SerializeToString()

    def as_b64(self) -> bytes:
        # Only ``/`` is swapped; Google accepts ``+`` in the query as-is
        return base64.b64encode(self.to_bytes()).replace(b"/", b"_")

    @classmethod
    def from_search(
        cls,
        search: FlightSearch,
        context: Sequence[SelectedFlight] = (),
    ) -> TFSData:
        """Build TFSData from a FlightSearch plus optional prior-leg context."""
        check_segment_count(search.segments)
        trip_type = classify_trip(search.segments)
        if trip_type == TripType.MULTI_CITY:
            msg = "Multi-city trips are not supported"
            raise SearchError(msg)

        return cls(
            flight_data=[FlightData.from_segment(s) for s in search.segments],
            seat=_CABIN_TO_PB_SEAT[search.cabin_class],
            trip=_TRIP_TO_PB_TRIP[trip_type],
            passengers=Passengers(search.passengers),
            context=context,
        )
