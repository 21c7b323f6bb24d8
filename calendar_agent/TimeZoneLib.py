import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# "Jan  2 15:04 2024": month abbreviation, space padded day, 24h clock, year
DATETIME_LAYOUT = "%b %d %H:%M %Y"
# single spaces between fields, two digit minutes
DATETIME_PATTERN = re.compile(r"[A-Z][a-z]{2} (?: \d|\d{1,2}) \d{1,2}:\d{2} \d{4}")

LOCATION_TIME_ZONES = {
    "Hong Kong": "Asia/Hong_Kong",
    "Tokyo(Haneda)": "Asia/Tokyo",
    "Tokyo(Narita)": "Asia/Tokyo",
    "Vancouver": "Canada/Pacific",
    "Montreal": "Canada/Eastern",
}


class UnknownLocationError(LookupError):
    def __init__(self, location):
        super().__init__(f"unrecognized location: {location!r}")
        self.location = location


class DateTimeParseError(ValueError):
    pass


def location_to_zone(location):
    # 決まった空港以外は既定のタイムゾーンに落とさずエラーにする
    try:
        return LOCATION_TIME_ZONES[location]
    except KeyError:
        raise UnknownLocationError(location) from None


def load_zone(zone_name):
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise DateTimeParseError(f"unknown time zone {zone_name!r}") from e


def parse_local_datetime(raw, zone_name):
    """
    Interpret a wall-clock string such as "Jan  2 15:04 2024" as local time in zone_name.

    The same reading gives a different instant depending on the zone, so departure and
    arrival times must each be parsed with their own airport's zone.
    """
    zone = load_zone(zone_name)
    if not DATETIME_PATTERN.fullmatch(raw):
        raise DateTimeParseError(f"cannot parse {raw!r}: expected a time like 'Jan  2 15:04 2024'")
    try:
        naive = datetime.strptime(raw, DATETIME_LAYOUT)
    except ValueError as e:
        raise DateTimeParseError(f"cannot parse {raw!r}: {e}") from e
    # 夏時間で存在しない時刻は実在する時刻に進める
    return naive.replace(tzinfo=zone).astimezone(zone)


def format_local_datetime(instant, zone_name):
    local = instant.astimezone(load_zone(zone_name))
    return f"{local:%b} {local.day:2d} {local:%H:%M} {local.year:04d}"


def to_rfc3339(instant):
    return instant.isoformat(timespec="seconds")
