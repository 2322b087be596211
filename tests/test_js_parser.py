"""Results page extraction and journey decoding."""

from __future__ import annotations

import base64
from datetime import UTC, datetime

import pytest

from sky_flights.exceptions import DecodeError, ProtocolError
from sky_flights.google.js_parser import (
    JourneyDecoder,
    NLData,
    extract_data,
    journey_records,
    parse_journeys,
)

from .conftest import (
    BA2662,
    OUTBOUND_RECORDS,
    TP1331,
    TP1901,
    FixtureFlight,
    journey_record,
    results_page,
)

# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def test_extract_data_returns_embedded_array():
    data = extract_data(results_page(OUTBOUND_RECORDS))
    assert isinstance(data, list)
    assert len(journey_records(data)) == 5


def test_extract_data_accepts_bytes():
    page = results_page([journey_record([BA2662], 8900)]).encode("utf-8")
    assert len(journey_records(extract_data(page))) == 1


def test_missing_script_tag():
    with pytest.raises(ProtocolError, match="Unable to find script tag"):
        extract_data("<html><body><p>Before you continue</p></body></html>")


def test_missing_data_start():
    page = '<html><script class="ds:1">AF_initDataCallback({key: 1});</script></html>'
    with pytest.raises(ProtocolError, match="Unable to find data start"):
        extract_data(page)


def test_missing_data_end():
    page = '<html><script class="ds:1">AF_initDataCallback({data:[1, 2]});</script>'
    with pytest.raises(ProtocolError, match="Unable to find data end"):
        extract_data(page)


def test_non_json_payload():
    page = (
        '<html><script class="ds:1">'
        "AF_initDataCallback({data:[oops, not json], sideChannel: {}});"
        "</script></html>"
    )
    with pytest.raises(DecodeError, match="JSON response did not decode to an array"):
        extract_data(page)


def test_protocol_errors_have_no_status():
    with pytest.raises(ProtocolError) as exc_info:
        extract_data("<html></html>")
    assert exc_info.value.status_code is None
    assert exc_info.value.reason is None


def test_no_results_yields_no_journeys():
    assert parse_journeys(results_page([])) == []


# ---------------------------------------------------------------------------
# NLData
# ---------------------------------------------------------------------------


def test_nldata_path_lookup():
    data = NLData([0, [1, [2, "deep"]]])
    assert data[[1, 1, 1]] == "deep"
    assert data[1] == [1, [2, "deep"]]


def test_nldata_path_off_the_end_is_none():
    data = NLData([0, [1]])
    assert data[[1, 5]] is None
    assert data[[0, 0]] is None


# ---------------------------------------------------------------------------
# Journey decoding
# ---------------------------------------------------------------------------


def test_parse_journeys_decodes_all_records():
    journeys = parse_journeys(results_page(OUTBOUND_RECORDS))
    assert [j.flights[0].code for j in journeys] == [
        "BA2662",
        "U28161",
        "FR8311",
        "TP1331",
        "W95701",
    ]
    assert [j.price for j in journeys] == [8900, 4599, 5250, 6500, 7120]
    assert {j.currency for j in journeys} == {"GBP"}


def test_decoded_flight_fields():
    journey = JourneyDecoder.decode(journey_record([BA2662], 8900))
    flight = journey.flights[0]

    assert flight.origin.code == "LGW"
    assert flight.origin.name == "LGW Airport"
    assert flight.destination.code == "FAO"
    assert flight.destination.name == "FAO Airport"
    assert flight.airline.code == "BA"
    assert flight.airline.name == "British Airways"
    assert flight.number == "2662"
    assert flight.departure == datetime(2025, 12, 16, 6, 0, tzinfo=UTC)
    assert flight.arrival == datetime(2025, 12, 16, 8, 55, tzinfo=UTC)


def test_operator_falls_back_to_airline_name():
    journey = JourneyDecoder.decode(journey_record([TP1331, TP1901], 6500))
    assert [f.operator for f in journey.flights] == ["TAP Air Portugal", "TAP Express"]
    assert journey.stops == 1
    assert journey.origin.code == "LGW"
    assert journey.destination.code == "FAO"


def test_numeric_flight_number_becomes_string():
    record = journey_record([BA2662], 8900)
    record[0][2][0][22][1] = 2662
    assert JourneyDecoder.decode(record).flights[0].number == "2662"


def test_price_in_other_currency():
    journey = JourneyDecoder.decode(journey_record([BA2662], 10350, "EUR"))
    assert (journey.price, journey.currency) == (10350, "EUR")


def test_flight_summary_not_a_string():
    record = journey_record([BA2662], 8900)
    record[8] = None
    with pytest.raises(DecodeError, match="Unable to decode flight summary"):
        JourneyDecoder.decode(record)


def test_flight_summary_without_quotes():
    record = journey_record([BA2662], 8900)
    record[8] = "[null,null]"
    with pytest.raises(DecodeError, match="Unable to decode flight summary"):
        JourneyDecoder.decode(record)


def test_flight_summary_not_protobuf():
    record = journey_record([BA2662], 8900)
    garbage = base64.b64encode(b"\xff\xff\xff\xff").decode("ascii")
    record[8] = f'[null,"{garbage}"]'
    with pytest.raises(DecodeError, match="Unable to decode flight summary"):
        JourneyDecoder.decode(record)


def test_flight_summary_shorter_than_flights():
    record = journey_record([TP1331, TP1901], 6500)
    record[8] = journey_record([TP1331], 6500)[8]
    with pytest.raises(DecodeError, match="Unable to parse flight summary"):
        JourneyDecoder.decode(record)


def test_no_flights():
    record = journey_record([BA2662], 8900)
    record[0][2] = []
    with pytest.raises(DecodeError, match="Unable to parse flights"):
        JourneyDecoder.decode(record)


@pytest.mark.parametrize("flights", ["BA2662", 2662, {"0": []}])
def test_flights_not_an_array(flights):
    record = journey_record([BA2662], 8900)
    record[0][2] = flights
    with pytest.raises(DecodeError, match="Unable to parse flights"):
        JourneyDecoder.decode(record)


def test_flight_arriving_before_departure():
    backwards = FixtureFlight(
        "BA", "2662", "LGW", "FAO", "2025-12-16T08:55:00", "2025-12-16T06:00:00"
    )
    with pytest.raises(DecodeError, match="Unable to parse flights: "):
        JourneyDecoder.decode(journey_record([backwards], 8900))


def test_missing_price():
    record = journey_record([BA2662], 8900)
    record[1] = [None, None]
    with pytest.raises(DecodeError, match="Unable to parse flight price"):
        JourneyDecoder.decode(record)


def test_price_summary_without_price_field():
    record = journey_record([BA2662], 8900)
    record[1][1] = ""
    with pytest.raises(DecodeError, match="Unable to parse flight price"):
        JourneyDecoder.decode(record)
