"""sky-flights - Google Flights search: query encoding, page decoding, itineraries."""

from sky_flights.base import BaseCache, BaseTransport, HttpResponse
from sky_flights.config import FlightSettings, settings
from sky_flights.exceptions import (
    DecodeError,
    FlightError,
    MissingCollaboratorError,
    ProtocolError,
    SearchError,
)
from sky_flights.schemas import (
    Airline,
    Airport,
    CabinClass,
    Flight,
    FlightSearch,
    Itinerary,
    Journey,
    PassengerType,
    Segment,
    SortOrder,
    TripType,
)
from sky_flights.service import FlightService

__all__ = [
    "Airline",
    "Airport",
    "BaseCache",
    "BaseTransport",
    "CabinClass",
    "DecodeError",
    "Flight",
    "FlightError",
    "FlightSearch",
    "FlightService",
    "FlightSettings",
    "HttpResponse",
    "Itinerary",
    "Journey",
    "MissingCollaboratorError",
    "PassengerType",
    "ProtocolError",
    "SearchError",
    "Segment",
    "SortOrder",
    "TripType",
    "settings",
]
