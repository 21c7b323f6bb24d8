import io
import logging
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from itinerary_parser.ItineraryParserLib import FlightRecord, ItineraryParser, parse_itinerary


SAMPLE = "\n".join([
    "CX101",
    "Jan  2 09:00 2024",
    "Hong Kong",
    "Jan  2 13:00 2024",
    "Tokyo(Haneda)",
    "",
    "AC6",
    "Jun 10 17:30 2024",
    "Tokyo(Narita)",
    "Jun 10 10:15 2024",
    "Vancouver",
    "",
])


def make_lines(n):
    return "\n".join(f"line {i}" for i in range(n))


@pytest.mark.parametrize("n_lines, expected", [
    (0, 0),
    (5, 0),
    (6, 1),
    (11, 1),
    (12, 2),
    (17, 2),
    (18, 3),
])
def test_one_record_per_full_block(n_lines, expected):
    assert len(parse_itinerary(make_lines(n_lines), log=Mock())) == expected


def test_empty_input_gives_no_records():
    assert parse_itinerary("", log=Mock()) == []


def test_fields_come_from_first_five_lines_of_each_block():
    flights = parse_itinerary(make_lines(12), log=Mock())

    assert flights[0] == FlightRecord(
        flight_number="line 0",
        start_datetime="line 1",
        start_location="line 2",
        end_datetime="line 3",
        end_location="line 4",
    )
    assert flights[1].flight_number == "line 6"
    assert flights[1].end_location == "line 10"


def test_sample_itinerary():
    flights = parse_itinerary(SAMPLE, log=Mock())

    assert [f.flight_number for f in flights] == ["CX101", "AC6"]
    assert flights[0].start_datetime == "Jan  2 09:00 2024"
    assert flights[0].start_location == "Hong Kong"
    assert flights[0].end_datetime == "Jan  2 13:00 2024"
    assert flights[0].end_location == "Tokyo(Haneda)"
    assert flights[1].start_location == "Tokyo(Narita)"


def test_field_contents_are_not_validated():
    text = "\n".join(["", "not a date", "Atlantis", "", "", ""])
    flights = parse_itinerary(text, log=Mock())

    assert len(flights) == 1
    assert flights[0].start_location == "Atlantis"
    assert flights[0].flight_number == ""


def test_each_record_is_logged():
    log = Mock()
    parse_itinerary(SAMPLE, log=log)

    assert log.info.call_count == 2
    assert "CX101" in repr(log.info.call_args_list[0].args[1])


def test_default_logger_is_used(caplog):
    with caplog.at_level(logging.INFO, logger="itinerary_parser.ItineraryParserLib"):
        parse_itinerary(SAMPLE)

    assert "CX101" in caplog.text
    assert "AC6" in caplog.text


def test_records_are_immutable():
    flight = parse_itinerary(SAMPLE, log=Mock())[0]

    with pytest.raises(ValidationError):
        flight.flight_number = "XX000"


def test_parser_reads_stream():
    parser = ItineraryParser(io.StringIO(SAMPLE), log=Mock())
    flights = parser.run()

    assert len(flights) == 2
    assert flights[1].end_location == "Vancouver"
