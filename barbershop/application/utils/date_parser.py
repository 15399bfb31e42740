from __future__ import annotations

import re
from datetime import date, datetime, time

STORE_DATE_FORMAT = "%d/%m/%Y"  # "dia" field
STORE_DATE_KEY_FORMAT = "%d-%m-%Y"  # disabled-day keys ("/" is a path separator)
STORE_TIME_FORMAT = "%H:%M"

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_store_date(value: str) -> date:
    """Parse a DD/MM/YYYY string. Raises ValueError."""
    return datetime.strptime(value.strip(), STORE_DATE_FORMAT).date()


def format_store_date(value: date) -> str:
    return value.strftime(STORE_DATE_FORMAT)


def parse_date_key(value: str) -> date:
    """Parse a DD-MM-YYYY key. Raises ValueError."""
    return datetime.strptime(value.strip(), STORE_DATE_KEY_FORMAT).date()


def format_date_key(value: date) -> str:
    return value.strftime(STORE_DATE_KEY_FORMAT)


def parse_time_of_day(value: str) -> time | None:
    """Parse "H:MM" / "HH:MM" (24h). Returns None when the text is not a valid time."""
    match = TIME_PATTERN.match(value.strip())
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def parse_store_time(value: str) -> time:
    parsed = parse_time_of_day(value)
    if parsed is None:
        raise ValueError(f"invalid time of day: {value!r}")
    return parsed


def format_store_time(value: time) -> str:
    return value.strftime(STORE_TIME_FORMAT)


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)
