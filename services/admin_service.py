"""
Admin Service - audit trail of admin actions and roster counts
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import AdminAction, User
from services.timezone_utils import utc_now

logger = logging.getLogger(__name__)


def log_admin_action(
    db: Session,
    admin_id: int,
    action: str,
    target_user_id: Optional[int] = None,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AdminAction:
    entry = AdminAction(
        admin_id=admin_id,
        action=action,
        target_user_id=target_user_id,
        details=details,
        ip_address=ip_address or "unknown",
        created_at=utc_now(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(f"Admin {admin_id} performed {action} (target={target_user_id})")
    return entry


def get_admin_actions(db: Session, admin_id: Optional[int] = None, limit: int = 100) -> List[AdminAction]:
    query = db.query(AdminAction)
    if admin_id is not None:
        query = query.filter(AdminAction.admin_id == admin_id)
    return query.order_by(AdminAction.created_at.desc(), AdminAction.id.desc()).limit(limit).all()


def get_moderator_stats(db: Session) -> dict:
    total = db.query(func.count(User.id)).filter(User.role == "moderator").scalar() or 0
    active = db.query(func.count(User.id))\
        .filter(User.role == "moderator", User.is_active == True)\
        .scalar() or 0
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
    }
