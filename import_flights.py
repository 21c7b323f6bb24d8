"""
Read a flight itinerary from stdin and add every flight to Google Calendar.

Input is six lines per flight:

    CX101
    Jan  2 09:00 2024
    Hong Kong
    Jan  2 13:00 2024
    Tokyo(Haneda)
    <blank>

Settings come from the environment or a .env file: CAL_ID (required),
GOOGLE_CREDENTIALS_FILE and GOOGLE_TOKEN_FILE.
"""
import sys
import logging

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from calendar_agent.GoogleCalendarLib import (
    ConfigurationError,
    FlightEventSubmitter,
    GoogleCalendar,
    load_config,
)
from calendar_agent.TimeZoneLib import DateTimeParseError, UnknownLocationError
from itinerary_parser.ItineraryParserLib import ItineraryParser


logger = logging.getLogger(__name__)

FATAL_ERRORS = (ConfigurationError, UnknownLocationError, DateTimeParseError, HttpError, RefreshError)


def run(stream, env_file=".env", calendar=None):
    config = load_config(env_file)
    if calendar is None:
        calendar = GoogleCalendar.from_config(config)

    flights = ItineraryParser(stream).run()
    submitter = FlightEventSubmitter(calendar, config.calendar_id)
    return submitter.submit(flights)


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        run(sys.stdin)
    except FATAL_ERRORS as e:
        logger.error("Aborting: %s", e)
        sys.exit(1)


if __name__ == '__main__':
    main()
