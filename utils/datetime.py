from datetime import date, datetime
from typing import Optional, Union

import pytz

from config import BUSINESS_TIMEZONE


def business_today(tz_name: str = BUSINESS_TIMEZONE) -> date:
    """
    Current calendar date in the business timezone.
    """
    return datetime.now(pytz.timezone(tz_name)).date()


def add_years(value: date, years: int) -> date:
    """Same calendar day `years` later; Feb 29 falls back to Feb 28"""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse a pickup date. Accepts date objects, datetimes (time of day is
    dropped) and ISO strings ("2025-01-31" or "2025-01-31T10:00:00").
    Returns None when the value cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    date_formats = [
        "%Y-%m-%d",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M",
        "%Y-%m-%d %H:%M:%S",
    ]

    for fmt in date_formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def to_business_date(value: Union[str, datetime, None], tz_name: str = BUSINESS_TIMEZONE) -> Optional[date]:
    """
    Calendar date of a stored timestamp in the business timezone.
    Naive timestamps are taken as UTC.
    """
    if value is None:
        return None

    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None

    if value.tzinfo is None:
        value = pytz.utc.localize(value)

    return value.astimezone(pytz.timezone(tz_name)).date()
