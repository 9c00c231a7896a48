"""
Login Service - login/logout audit trail
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, aliased

from models import LoginLog
from services.timezone_utils import to_utc_naive, today_bounds_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


def create_login_log(
    db: Session,
    user_id: int,
    ip_address: str,
    location: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LoginLog:
    log = LoginLog(
        user_id=user_id,
        ip_address=ip_address or "unknown",
        location=location,
        user_agent=user_agent,
        login_time=to_utc_naive(now) if now else utc_now(),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def update_logout_time(db: Session, user_id: int, logout_time: Optional[datetime] = None) -> bool:
    """
    Close the user's most recent open login record.

    A single UPDATE whose WHERE clause selects the newest open row, so there is
    no read-then-write window.

    Returns:
        True when a record was closed, False when none was open.
    """
    # Aliased so the subquery is not correlated with the UPDATE target
    open_log = aliased(LoginLog)
    newest_open = select(open_log.id)\
        .where(open_log.user_id == user_id, open_log.logout_time.is_(None))\
        .order_by(open_log.login_time.desc(), open_log.id.desc())\
        .limit(1)\
        .scalar_subquery()

    stmt = update(LoginLog)\
        .where(LoginLog.id == newest_open, LoginLog.logout_time.is_(None))\
        .values(logout_time=to_utc_naive(logout_time) if logout_time else utc_now())\
        .execution_options(synchronize_session=False)

    result = db.execute(stmt)
    db.commit()
    return result.rowcount > 0


def get_user_login_history(db: Session, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> List[LoginLog]:
    return db.query(LoginLog)\
        .filter(LoginLog.user_id == user_id)\
        .order_by(LoginLog.login_time.desc(), LoginLog.id.desc())\
        .limit(limit)\
        .all()


def get_login_stats(db: Session, now: Optional[datetime] = None) -> dict:
    start, end = today_bounds_utc(now)
    today = db.query(func.count(LoginLog.id))\
        .filter(LoginLog.login_time >= start, LoginLog.login_time < end)\
        .scalar()
    total = db.query(func.count(LoginLog.id)).scalar()
    return {"today": today or 0, "total": total or 0}
