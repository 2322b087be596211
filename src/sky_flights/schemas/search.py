"""Search segment and persistent search configuration schemas."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import CabinClass, PassengerType, SortOrder


def _split_codes(value: object) -> tuple[str, ...]:
    """Accept ``"LGW,STN"`` or an iterable of codes; drop blanks, upper-case."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, Iterable):
        msg = f"Expected a code string or iterable of codes, got {value!r}"
        raise TypeError(msg)
    return tuple(str(code).strip().upper() for code in value if str(code).strip())


class Segment(BaseModel):
    """One leg of the search: where from, where to, when."""

    model_config = ConfigDict(frozen=True)

    origins: tuple[str, ...] = Field(min_length=1)
    destinations: tuple[str, ...] = Field(min_length=1)
    date: dt.date
    max_stops: int = Field(default=0, ge=0)
    airlines: tuple[str, ...] = ()

    @field_validator("origins", "destinations", "airlines", mode="before")
    @classmethod
    def _normalise_codes(cls, value: object) -> tuple[str, ...]:
        return _split_codes(value)

    @field_validator("date", mode="before")
    @classmethod
    def _normalise_date(cls, value: object) -> object:
        if value is None:
            return dt.datetime.now(dt.UTC).date()
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            return dt.datetime.fromisoformat(value).date()
        return value


class FlightSearch(BaseModel):
    """Immutable search configuration.

    Every ``add_*``/``with_*``/``clear_*`` method returns a new instance, so a
    base search can be shared and specialised without interference::

        base = FlightSearch().add_segment("LGW", "FAO", "2025-12-16")
        business = base.with_cabin_class(CabinClass.BUSINESS)
    """

    model_config = ConfigDict(frozen=True)

    segments: tuple[Segment, ...] = ()
    passengers: tuple[PassengerType, ...] = ()
    cabin_class: CabinClass = CabinClass.ECONOMY
    sort_order: SortOrder = SortOrder.PRICE
    currency: str = Field(default="GBP", min_length=3, max_length=3)
    language: str = "en-GB"
    use_cache: bool = True

    def add_segment(
        self,
        origin: str | Iterable[str],
        destination: str | Iterable[str],
        date: dt.date | str | None = None,
        max_stops: int = 0,
        airlines: str | Iterable[str] = (),
    ) -> FlightSearch:
        segment = Segment.model_validate(
            {
                "origins": origin,
                "destinations": destination,
                "date": date,
                "max_stops": max_stops,
                "airlines": airlines,
            }
        )
        return self.model_copy(update={"segments": (*self.segments, segment)})

    def clear_segments(self) -> FlightSearch:
        return self.model_copy(update={"segments": ()})

    def add_passenger(self, passenger: PassengerType) -> FlightSearch:
        passengers = (*self.passengers, PassengerType(passenger))
        return self.model_copy(update={"passengers": passengers})

    def with_passengers(self, passengers: Iterable[PassengerType]) -> FlightSearch:
        return self.model_copy(
            update={"passengers": tuple(PassengerType(p) for p in passengers)}
        )

    def clear_passengers(self) -> FlightSearch:
        return self.model_copy(update={"passengers": ()})

    def with_cabin_class(self, cabin_class: CabinClass) -> FlightSearch:
        return self.model_copy(update={"cabin_class": CabinClass(cabin_class)})

    def with_sort_order(self, sort_order: SortOrder) -> FlightSearch:
        return self.model_copy(update={"sort_order": SortOrder(sort_order)})

    def with_currency(self, currency: str) -> FlightSearch:
        return self.model_copy(update={"currency": currency.upper()})

    def with_language(self, language: str) -> FlightSearch:
        return self.model_copy(update={"language": language})

    def without_cache(self) -> FlightSearch:
        return self.model_copy(update={"use_cache": False})
