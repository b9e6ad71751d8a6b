from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from config import get_settings


def local_now() -> datetime:
    """Current wall-clock time in the configured timezone, without tzinfo."""
    tz = ZoneInfo(get_settings().timezone)
    return datetime.now(tz).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def start_of_today(now: Optional[datetime] = None) -> datetime:
    now = now or local_now()
    return datetime.combine(now.date(), time.min)


def to_local_naive(value: datetime) -> datetime:
    """Normalise a datetime to naive local time.

    Naive values are taken to already be local. Aware values are converted
    into the configured timezone first, so that stored costs and report
    windows always agree on which calendar month a moment falls into.
    """
    if value.tzinfo is None:
        return value
    tz = ZoneInfo(get_settings().timezone)
    return value.astimezone(tz).replace(tzinfo=None)


def is_past_month(year: int, month: int, *, today: Optional[date] = None) -> bool:
    # Compared as integers: years past 9999 are valid and always in the future.
    today = today or local_today()
    return (year, month) < (today.year, today.month)


def in_month(value: datetime, year: int, month: int) -> bool:
    return value.year == year and value.month == month
