"""Date manipulation utilities"""

import math
from datetime import datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

WEEK = timedelta(days=7)

# Offsets for each recurrence / period frequency
FREQUENCY_OFFSETS = {
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}


def utcnow() -> datetime:
    """Current time as naive UTC, the representation used throughout the core"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_year(year: int) -> datetime:
    return datetime(year, 1, 1)


def week_of_year(now: datetime, year: int) -> int:
    """Whole weeks (rounded up) elapsed between Jan 1 of `year` and `now`"""
    return math.ceil((now - start_of_year(year)) / WEEK)


def quarter_of(month: int) -> int:
    return math.ceil(month / 3)


def add_frequency(value: datetime, frequency: str) -> datetime:
    """Step a timestamp forward by one frequency; month steps clamp to month end"""
    return value + FREQUENCY_OFFSETS[frequency]


def add_years(value: datetime, years: int) -> datetime:
    return value + relativedelta(years=years)
