"""
User Service - accounts, moderator roster and the dashboard summary
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from auth import hash_password, verify_password
from models import AttendanceRecord, LoginLog, User
from services.timezone_utils import local_today, month_start, utc_now, working_days_between

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    role: str = "moderator",
) -> User:
    """Insert a user. Emails are stored lower-cased; the unique index rejects duplicates."""
    now = utc_now()
    user = User(
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created {role} account {user.email}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        logger.info(f"Login refused for deactivated account {user.email}")
        return None
    return user


def get_all_moderators(db: Session) -> List[User]:
    return db.query(User)\
        .filter(User.role == "moderator")\
        .order_by(User.first_name, User.last_name, User.id)\
        .all()


def update_user_status(db: Session, user_id: int, is_active: bool) -> Optional[User]:
    user = get_user(db, user_id)
    if not user:
        return None
    user.is_active = is_active
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    return user


def get_user_stats(db: Session, user_id: int, now: Optional[datetime] = None) -> dict:
    """
    Current-month attendance summary for one user.

    Returns:
        dict: present_days, working_days (Mon-Fri elapsed this month),
        attendance_rate (rounded percent) and recent_activity (latest logins)
    """
    today = local_today(now)
    first = month_start(today)

    present_days = db.query(func.count(func.distinct(AttendanceRecord.attendance_day)))\
        .filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.attendance_day >= first,
            AttendanceRecord.attendance_day <= today,
        ).scalar() or 0

    working_days = working_days_between(first, today)
    attendance_rate = round(present_days / working_days * 100) if working_days else 0

    recent_activity = db.query(LoginLog)\
        .filter(LoginLog.user_id == user_id)\
        .order_by(LoginLog.login_time.desc(), LoginLog.id.desc())\
        .limit(RECENT_ACTIVITY_LIMIT)\
        .all()

    return {
        "present_days": present_days,
        "working_days": working_days,
        "attendance_rate": attendance_rate,
        "recent_activity": recent_activity,
    }
