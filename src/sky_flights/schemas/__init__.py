"""Search and result schemas for sky_flights."""

from .enums import CabinClass, PassengerType, SortOrder, TripType
from .flight import Airline, Airport, Flight, Itinerary, Journey
from .search import FlightSearch, Segment

__all__ = [
    "Airline",
    "Airport",
    "CabinClass",
    "Flight",
    "FlightSearch",
    "Itinerary",
    "Journey",
    "PassengerType",
    "Segment",
    "SortOrder",
    "TripType",
]
