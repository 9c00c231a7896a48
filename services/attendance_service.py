"""
Attendance Service - daily attendance marks
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import AttendanceRecord
from services.timezone_utils import local_today, to_utc_naive, today_bounds_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 30


def mark_attendance(
    db: Session,
    user_id: int,
    ip_address: str,
    location: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[AttendanceRecord]:
    """
    Record today's attendance for a user.

    The insert is guarded by the (user_id, attendance_day) unique constraint,
    so concurrent calls cannot both succeed.

    Returns:
        The new record, or None when the user has already marked today.
    """
    marked_at = to_utc_naive(now) if now else utc_now()
    record = AttendanceRecord(
        user_id=user_id,
        date=marked_at,
        attendance_day=local_today(marked_at),
        ip_address=ip_address or "unknown",
        location=location,
        user_agent=user_agent,
        created_at=marked_at,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Attendance already marked today for user {user_id}")
        return None
    db.refresh(record)
    return record


def get_today_attendance(db: Session, user_id: int, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
    start, end = today_bounds_utc(now)
    return db.query(AttendanceRecord)\
        .filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date >= start,
            AttendanceRecord.date < end,
        )\
        .order_by(AttendanceRecord.date.desc())\
        .first()


def get_user_attendance_history(db: Session, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> List[AttendanceRecord]:
    return db.query(AttendanceRecord)\
        .filter(AttendanceRecord.user_id == user_id)\
        .order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc())\
        .limit(limit)\
        .all()


def get_attendance_by_date_range(
    db: Session,
    user_id: int,
    start: datetime,
    end: datetime,
) -> List[AttendanceRecord]:
    # Both bounds inclusive
    return db.query(AttendanceRecord)\
        .filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date >= to_utc_naive(start),
            AttendanceRecord.date <= to_utc_naive(end),
        )\
        .order_by(AttendanceRecord.date.desc())\
        .all()


def get_attendance_stats(db: Session, now: Optional[datetime] = None) -> dict:
    start, end = today_bounds_utc(now)
    today = db.query(func.count(AttendanceRecord.id))\
        .filter(AttendanceRecord.date >= start, AttendanceRecord.date < end)\
        .scalar()
    total = db.query(func.count(AttendanceRecord.id)).scalar()
    return {"today": today or 0, "total": total or 0}
