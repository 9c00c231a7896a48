from datetime import datetime, timedelta

from services.attendance_service import (
    get_attendance_by_date_range,
    get_attendance_stats,
    get_today_attendance,
    get_user_attendance_history,
    mark_attendance,
)
from services.user_service import create_user

NOW = datetime(2026, 3, 18, 9, 0)


def make_user(db, email="att@company.com"):
    return create_user(db, email=email, password="Pwd#12345", first_name="Att", last_name="User")


def test_mark_then_today_returns_record(db):
    user = make_user(db)
    record = mark_attendance(db, user.id, ip_address="10.0.0.7", location="London", user_agent="pytest", now=NOW)
    assert record is not None
    assert record.attendance_day == NOW.date()

    today = get_today_attendance(db, user.id, now=NOW + timedelta(hours=3))
    assert today is not None
    assert today.id == record.id
    assert today.ip_address == "10.0.0.7"
    assert today.location == "London"


def test_second_mark_same_day_is_rejected(db):
    user = make_user(db)
    assert mark_attendance(db, user.id, ip_address="10.0.0.7", now=NOW) is not None
    assert mark_attendance(db, user.id, ip_address="10.0.0.8", now=NOW + timedelta(hours=5)) is None

    history = get_user_attendance_history(db, user.id)
    assert len(history) == 1
    assert history[0].ip_address == "10.0.0.7"


def test_mark_next_day_is_allowed(db):
    user = make_user(db)
    assert mark_attendance(db, user.id, ip_address="ip", now=NOW) is not None
    assert mark_attendance(db, user.id, ip_address="ip", now=NOW + timedelta(days=1)) is not None


def test_today_is_empty_when_not_marked(db):
    user = make_user(db)
    mark_attendance(db, user.id, ip_address="ip", now=NOW - timedelta(days=1))
    assert get_today_attendance(db, user.id, now=NOW) is None


def test_history_newest_first_with_limit(db):
    user = make_user(db)
    for offset in range(5):
        mark_attendance(db, user.id, ip_address="ip", now=NOW - timedelta(days=offset))

    history = get_user_attendance_history(db, user.id, limit=3)
    assert [r.attendance_day for r in history] == [
        NOW.date(),
        (NOW - timedelta(days=1)).date(),
        (NOW - timedelta(days=2)).date(),
    ]


def test_date_range_is_inclusive(db):
    user = make_user(db)
    for offset in range(5):
        mark_attendance(db, user.id, ip_address="ip", now=NOW - timedelta(days=offset))

    start = NOW - timedelta(days=3)
    end = NOW - timedelta(days=1)
    rows = get_attendance_by_date_range(db, user.id, start, end)
    assert [r.date for r in rows] == [end, NOW - timedelta(days=2), start]


def test_attendance_stats_counts_today_and_total(db):
    users = [make_user(db, f"user{i}@company.com") for i in range(4)]

    # 3 marks today
    for user in users[:3]:
        mark_attendance(db, user.id, ip_address="ip", now=NOW)
    # 7 marks on earlier days
    for offset in range(1, 8):
        mark_attendance(db, users[3].id, ip_address="ip", now=NOW - timedelta(days=offset))

    assert get_attendance_stats(db, now=NOW) == {"today": 3, "total": 10}
