from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from services import timezone_utils
from services.timezone_utils import (
    day_bounds_utc,
    format_local_datetime,
    local_today,
    month_start,
    to_utc_naive,
    week_days,
    working_days_between,
)


@pytest.fixture
def kolkata(monkeypatch):
    monkeypatch.setattr(timezone_utils, "APP_TIMEZONE", ZoneInfo("Asia/Kolkata"))


def test_to_utc_naive():
    assert to_utc_naive(None) is None
    naive = datetime(2026, 3, 18, 9, 0)
    assert to_utc_naive(naive) is naive
    aware = datetime(2026, 3, 18, 9, 0, tzinfo=ZoneInfo("Asia/Kolkata"))
    assert to_utc_naive(aware) == datetime(2026, 3, 18, 3, 30)


def test_day_bounds_in_utc():
    assert day_bounds_utc(date(2026, 3, 18)) == (datetime(2026, 3, 18), datetime(2026, 3, 19))


def test_local_day_follows_app_timezone(kolkata):
    # 20:00 UTC is already the next day in Kolkata
    assert local_today(datetime(2026, 3, 18, 20, 0)) == date(2026, 3, 19)
    assert day_bounds_utc(date(2026, 3, 19)) == (datetime(2026, 3, 18, 18, 30), datetime(2026, 3, 19, 18, 30))
    assert format_local_datetime(datetime(2026, 3, 18, 20, 0, tzinfo=timezone.utc)) == "2026-03-19 01:30:00"


def test_working_days():
    assert working_days_between(date(2026, 3, 1), date(2026, 3, 18)) == 13
    assert working_days_between(date(2026, 3, 7), date(2026, 3, 8)) == 0
    assert working_days_between(date(2026, 3, 18), date(2026, 3, 1)) == 0
    assert month_start(date(2026, 3, 18)) == date(2026, 3, 1)


def test_week_days_start_on_monday():
    days = week_days(date(2026, 3, 22))
    assert days[0] == date(2026, 3, 16)
    assert days[-1] == date(2026, 3, 22)
    assert len(days) == 7
