import sys
import logging

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


logger = logging.getLogger(__name__)

# 1便あたり5行 + 区切りの空行1行
LINES_PER_FLIGHT = 6


class FlightRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    flight_number: str = Field(description="Flight identifier, e.g. 'CX101'.")
    start_datetime: str = Field(description="Local departure time, e.g. 'Jan  2 09:00 2024'.")
    start_location: str = Field(description="Departure airport name, e.g. 'Hong Kong'.")
    end_datetime: str = Field(description="Local arrival time in the arrival airport's zone.")
    end_location: str = Field(description="Arrival airport name, e.g. 'Tokyo(Haneda)'.")


def parse_itinerary(text: str, log: Optional[logging.Logger] = None) -> List[FlightRecord]:
    """
    Split the itinerary text into blocks of six lines and build one FlightRecord per block.

    Lines of a block are: flight number, departure time, departure airport, arrival time,
    arrival airport, and a separator line that is skipped. A trailing block shorter than
    six lines is dropped without error. Field contents are not checked here.
    """
    log = log or logger
    lines = text.split("\n")

    flights = []
    for i in range(0, len(lines), LINES_PER_FLIGHT):
        if i + LINES_PER_FLIGHT > len(lines):
            break

        flight = FlightRecord(
            flight_number=lines[i],
            start_datetime=lines[i + 1],
            start_location=lines[i + 2],
            end_datetime=lines[i + 3],
            end_location=lines[i + 4],
        )
        log.info("%r", flight)
        flights.append(flight)

    return flights


class ItineraryParser:
    def __init__(self, stream=None, log=None):
        self.stream = stream if stream is not None else sys.stdin
        self.log = log

    def read(self):
        return self.stream.read()

    def run(self):
        return parse_itinerary(self.read(), log=self.log)
