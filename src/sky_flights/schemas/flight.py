"""Flight, journey and itinerary result models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from sky_flights.exceptions import FlightError


class Airport(BaseModel):
    """An airport, identified by its IATA code."""

    code: str
    name: str = ""

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Airport):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)

    def __str__(self) -> str:
        return f"{self.code} ({self.name})" if self.name else self.code


class Airline(BaseModel):
    """Marketing carrier."""

    code: str
    name: str = ""


class Flight(BaseModel):
    """A single operated flight."""

    origin: Airport
    destination: Airport
    airline: Airline
    number: str
    operator: str = ""
    departure: datetime
    arrival: datetime

    @field_validator("departure", "arrival")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _validate_times(self) -> Flight:
        if self.arrival <= self.departure:
            msg = (
                f"Flight {self.code} arrives ({self.arrival.isoformat()}) "
                f"before it departs ({self.departure.isoformat()})"
            )
            raise ValueError(msg)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def code(self) -> str:
        """Marketing flight code, e.g. ``BA2662``."""
        return f"{self.airline.code}{self.number}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> timedelta:
        return self.arrival - self.departure


class Journey(BaseModel):
    """One direction of travel: one or more connecting flights and a price.

    ``price`` is in minor currency units (pence, cents) exactly as Google
    reports it; it is never derived from the flights.
    """

    flights: list[Flight] = Field(min_length=1)
    price: int
    currency: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stops(self) -> int:
        return len(self.flights) - 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def departure(self) -> datetime:
        return self.flights[0].departure

    @computed_field  # type: ignore[prop-decorator]
    @property
    def arrival(self) -> datetime:
        return self.flights[-1].arrival

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> timedelta:
        return self.arrival - self.departure

    @property
    def origin(self) -> Airport:
        return self.flights[0].origin

    @property
    def destination(self) -> Airport:
        return self.flights[-1].destination


class Itinerary(BaseModel):
    """A complete search result: one journey per searched segment.

    Built up one journey at a time while segments are resolved. Price and
    currency are recomputed after every change to ``journeys``.
    """

    journeys: list[Journey] = Field(default_factory=list)
    price: int = 0
    currency: str = "GBP"
    default_currency: str = Field(default="GBP", exclude=True)

    def model_post_init(self, __context: object) -> None:
        self._update_price()

    @property
    def outbound(self) -> Journey:
        if not self.journeys:
            msg = "No journey found in itinerary"
            raise FlightError(msg)
        return self.journeys[0]

    @property
    def return_journey(self) -> Journey:
        if not self.journeys:
            msg = "No journey found in itinerary"
            raise FlightError(msg)
        return self.journeys[-1]

    @property
    def origin(self) -> Airport:
        return self.outbound.origin

    @property
    def destination(self) -> Airport:
        if self.is_return():
            return self.outbound.destination
        return self.return_journey.destination

    @property
    def departure(self) -> datetime:
        return self.outbound.departure

    @property
    def arrival(self) -> datetime:
        return self.return_journey.arrival

    @property
    def duration(self) -> timedelta:
        return self.arrival - self.departure

    @property
    def flights(self) -> list[Flight]:
        return [flight for journey in self.journeys for flight in journey.flights]

    def is_return(self) -> bool:
        """True for a two-journey itinerary whose legs mirror each other."""
        if len(self.journeys) != 2:
            return False
        first, second = self.journeys
        return (
            first.destination.code == second.origin.code
            and second.destination.code == first.origin.code
        )

    def add_journey(self, journey: Journey) -> Itinerary:
        self.journeys.append(journey)
        self.journeys.sort(key=lambda j: j.departure)
        self._update_price()
        return self

    def clear_journeys(self) -> Itinerary:
        self.journeys = []
        self._update_price()
        return self

    def clone(self) -> Itinerary:
        """Independent copy; journeys added to the clone never leak back."""
        return self.model_copy(deep=True)

    def _update_price(self) -> None:
        if not self.journeys:
            self.price = 0
            self.currency = self.default_currency
            return

        self.currency = self.journeys[0].currency
        prices = [journey.price for journey in self.journeys]
        # A return fare is quoted as the whole trip on every leg
        self.price = max(prices) if self.is_return() else sum(prices)
