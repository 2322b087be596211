"""Protobuf message classes for the Google Flights wire format.

The definitions mirror ``flights.proto`` in this directory. They are
registered with the default descriptor pool at import time, exactly as a
``protoc``-generated module would, so no build step is needed.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.internal import enum_type_wrapper

_PACKAGE = "sky_flights"

_Field = descriptor_pb2.FieldDescriptorProto

_INT32 = _Field.TYPE_INT32
_INT64 = _Field.TYPE_INT64
_UINT32 = _Field.TYPE_UINT32
_STRING = _Field.TYPE_STRING
_ENUM = _Field.TYPE_ENUM
_MESSAGE = _Field.TYPE_MESSAGE


def _field(
    name: str,
    number: int,
    kind: int,
    *,
    repeated: bool = False,
    type_name: str | None = None,
) -> descriptor_pb2.FieldDescriptorProto:
    field = _Field(
        name=name,
        number=number,
        type=kind,  # type: ignore[arg-type]
        label=_Field.LABEL_REPEATED if repeated else _Field.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = f".{_PACKAGE}.{type_name}"
    return field


def _message(
    name: str,
    *fields: descriptor_pb2.FieldDescriptorProto,
    nested: tuple[descriptor_pb2.DescriptorProto, ...] = (),
) -> descriptor_pb2.DescriptorProto:
    return descriptor_pb2.DescriptorProto(
        name=name, field=list(fields), nested_type=list(nested)
    )


def _enum(name: str, *values: str) -> descriptor_pb2.EnumDescriptorProto:
    return descriptor_pb2.EnumDescriptorProto(
        name=name,
        value=[
            descriptor_pb2.EnumValueDescriptorProto(name=value, number=number)
            for number, value in enumerate(values)
        ],
    )


_SUMMARY_FLIGHT = "FlightSummary.Itinerary.Sector.Flight"

_FILE = descriptor_pb2.FileDescriptorProto(
    name="sky_flights/flights.proto",
    package=_PACKAGE,
    syntax="proto2",
    enum_type=[
        _enum("Seat", "UNKNOWN_SEAT", "ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"),
        _enum("Trip", "UNKNOWN_TRIP", "ROUND_TRIP", "ONE_WAY", "MULTI_CITY"),
        _enum(
            "Passenger",
            "UNKNOWN_PASSENGER",
            "ADULT",
            "CHILD",
            "INFANT_IN_SEAT",
            "INFANT_ON_LAP",
        ),
    ],
    message_type=[
        _message(
            "Airport",
            _field("flag", 1, _INT32),
            _field("airport", 2, _STRING),
        ),
        _message(
            "ItineraryData",
            _field("departure_airport", 1, _STRING),
            _field("departure_date", 2, _STRING),
            _field("arrival_airport", 3, _STRING),
            _field("flight_code", 5, _STRING),
            _field("flight_number", 6, _STRING),
        ),
        _message(
            "FlightData",
            _field("date", 2, _STRING),
            _field("itin_data", 4, _MESSAGE, repeated=True, type_name="ItineraryData"),
            _field("max_stops", 5, _INT32),
            _field("airlines", 6, _STRING, repeated=True),
            _field("from_flight", 13, _MESSAGE, repeated=True, type_name="Airport"),
            _field("to_flight", 14, _MESSAGE, repeated=True, type_name="Airport"),
        ),
        _message(
            "Info",
            _field("data", 3, _MESSAGE, repeated=True, type_name="FlightData"),
            _field("passengers", 8, _ENUM, repeated=True, type_name="Passenger"),
            _field("seat", 9, _ENUM, type_name="Seat"),
            _field("trip", 19, _ENUM, type_name="Trip"),
        ),
        _message(
            "Price",
            _field("price", 1, _INT64),
            _field("currency", 3, _STRING),
        ),
        _message(
            "ItinerarySummary",
            _field("flights", 2, _STRING),
            _field("price", 3, _MESSAGE, type_name="Price"),
        ),
        _message(
            "FlightSummary",
            _field("itinerary", 2, _MESSAGE, type_name="FlightSummary.Itinerary"),
            nested=(
                _message(
                    "Itinerary",
                    _field(
                        "sector",
                        3,
                        _MESSAGE,
                        type_name="FlightSummary.Itinerary.Sector",
                    ),
                    nested=(
                        _message(
                            "Sector",
                            _field(
                                "flight", 1, _MESSAGE, repeated=True, type_name=_SUMMARY_FLIGHT
                            ),
                            nested=(
                                _message(
                                    "Flight",
                                    _field("number", 2, _INT32),
                                    _field("departure", 3, _STRING),
                                    _field("arrival", 4, _STRING),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        ),
        _message(
            "Information",
            _field("gws", 2, _STRING),
            _field("locale", 3, _STRING),
        ),
        _message(
            "Datetime",
            _field("timestamp", 1, _UINT32),
        ),
        _message(
            "SOCS",
            _field("info", 1, _MESSAGE, type_name="Information"),
            _field("datetime", 2, _MESSAGE, type_name="Datetime"),
        ),
    ],
)

_pool = descriptor_pool.Default()
_pool.AddSerializedFile(_FILE.SerializeToString())


def _message_class(name: str) -> type:
    descriptor = _pool.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    return message_factory.GetMessageClass(descriptor)


def _enum_wrapper(name: str) -> enum_type_wrapper.EnumTypeWrapper:
    return enum_type_wrapper.EnumTypeWrapper(
        _pool.FindEnumTypeByName(f"{_PACKAGE}.{name}")
    )


Seat = _enum_wrapper("Seat")
Trip = _enum_wrapper("Trip")
Passenger = _enum_wrapper("Passenger")

Airport = _message_class("Airport")
ItineraryData = _message_class("ItineraryData")
FlightData = _message_class("FlightData")
Info = _message_class("Info")
Price = _message_class("Price")
ItinerarySummary = _message_class("ItinerarySummary")
FlightSummary = _message_class("FlightSummary")
Information = _message_class("Information")
Datetime = _message_class("Datetime")
SOCS = _message_class("SOCS")
