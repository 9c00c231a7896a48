import os
from datetime import date, datetime, time, timezone, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# "Today" is a calendar day in the application timezone.
# All DateTime columns hold naive UTC.
APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "UTC"))

def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

def to_local(utc_dt: Optional[datetime]) -> Optional[datetime]:
    if utc_dt is None:
        return None
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)
    return utc_dt.astimezone(APP_TIMEZONE)

def to_utc_naive(dt: Optional[datetime]) -> Optional[datetime]:
    # Naive input is assumed to already be UTC
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)

def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or utc_now()).date()

def day_bounds_utc(day: date) -> Tuple[datetime, datetime]:
    """
    Return the [start, end) UTC window of a local calendar day.

    Both values are naive UTC so they compare directly against stored columns.
    """
    start = datetime.combine(day, time.min, tzinfo=APP_TIMEZONE)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=APP_TIMEZONE)
    return to_utc_naive(start), to_utc_naive(end)

def today_bounds_utc(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    return day_bounds_utc(local_today(now))

def month_start(day: date) -> date:
    return day.replace(day=1)

def working_days_between(start: date, end: date) -> int:
    # Mon-Fri days in the inclusive range
    if end < start:
        return 0
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count

def week_days(day: date) -> list[date]:
    # Monday..Sunday of the week containing `day`
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=i) for i in range(7)]

def format_local_datetime(utc_dt: Optional[datetime]) -> Optional[str]:
    if utc_dt is None:
        return None
    return to_local(utc_dt).strftime("%Y-%m-%d %H:%M:%S")
