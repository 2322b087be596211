"""Enums shared by search configuration and results."""

from enum import IntEnum, StrEnum


class CabinClass(StrEnum):
    """Cabin class requested for the search."""

    UNKNOWN = "UNKNOWN"
    ECONOMY = "ECONOMY"
    PREMIUM_ECONOMY = "PREMIUM_ECONOMY"
    BUSINESS = "BUSINESS"
    FIRST = "FIRST"


class PassengerType(IntEnum):
    """Passenger category. Values match the wire ``Passenger`` enum."""

    ADULT = 1
    CHILD = 2
    INFANT_IN_SEAT = 3
    INFANT_ON_LAP = 4


class SortOrder(StrEnum):
    """Ordering applied to the resolved itineraries."""

    BEST = "BEST"
    PRICE = "PRICE"
    DURATION = "DURATION"
    DEPARTURE_TIME = "DEPARTURE_TIME"


class TripType(StrEnum):
    """Trip type."""

    ONE_WAY = "ONE_WAY"
    ROUND_TRIP = "ROUND_TRIP"
    MULTI_CITY = "MULTI_CITY"
