"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Tuple
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

SATURDAY = 5

DEFAULT_TIMEZONE = "America/Sao_Paulo"
REFERENCE_HOUR = 12


def is_weekend(day: date) -> bool:
    """Saturday or Sunday"""
    return day.weekday() >= SATURDAY


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def next_business_day(day: date) -> date:
    """
    Return the first weekday on or after `day`.

    Weekend dates roll forward to Monday; weekdays come back untouched.
    Holidays are not considered.
    """
    while is_weekend(day):
        day = add_days(day, 1)
    return day


def parse_calendar_date(value: date | datetime | str) -> date:
    """
    Coerce a date-like value into a plain calendar date.

    Accepts a `date`, a `datetime` (its wall-clock date is kept) or an ISO-8601
    string ("2024-03-01" or "2024-03-01T12:00:00-03:00").

    Raises:
        ValueError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    raise ValueError(f"Not a calendar date: {value!r}")


def at_reference_time(
    day: date,
    timezone: str = DEFAULT_TIMEZONE,
    hour: int = REFERENCE_HOUR,
) -> datetime:
    """Pin a calendar date to a fixed time of day so it survives UTC conversion"""
    return datetime(day.year, day.month, day.day, hour, tzinfo=ZoneInfo(timezone))


def to_iso_instant(
    day: date,
    timezone: str = DEFAULT_TIMEZONE,
    hour: int = REFERENCE_HOUR,
) -> str:
    """Format as yyyy-MM-ddTHH:mm:ss±HH:MM at the reference hour"""
    return at_reference_time(day, timezone, hour).isoformat(timespec="seconds")


def today_in(timezone: str = DEFAULT_TIMEZONE) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month (inclusive)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def parse_month(value: str) -> Tuple[int, int]:
    """
    Parse a "YYYY-MM" month key.

    Raises:
        ValueError: On malformed keys or month numbers outside 1-12
    """
    parts = value.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid month: {value!r}")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value!r}")
    return year, month


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def last_n_months(reference: date, n: int) -> List[str]:
    """Month keys for the `n` months ending at `reference`, oldest first"""
    return [month_key(reference + relativedelta(months=-offset)) for offset in range(n - 1, -1, -1)]
