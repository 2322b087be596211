"""Error hierarchy surfaced to callers of the flight search."""

from __future__ import annotations


class FlightError(Exception):
    """Base class for every error raised by sky_flights."""


class MissingCollaboratorError(FlightError):
    """A required collaborator (transport, service) was not provided."""


class SearchError(FlightError):
    """The search configuration cannot be turned into a query."""


class ProtocolError(FlightError):
    """Google Flights answered with an error or an unrecognisable page."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class DecodeError(FlightError):
    """The response payload was found but could not be decoded."""
