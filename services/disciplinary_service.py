"""
Disciplinary Service - warnings and strikes against moderators

Expiry is enforced in two places:
- reads of active actions ignore rows whose expires_at has passed
- expire_disciplinary_actions() flips the stored flag (daily scheduler job)
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from models import DisciplinaryAction
from schemas import DisciplinaryActionCreate, DisciplinaryActionUpdate
from services.timezone_utils import to_utc_naive, utc_now

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("type", "reason", "severity")


def create_disciplinary_action(db: Session, admin_id: int, action: DisciplinaryActionCreate) -> DisciplinaryAction:
    now = utc_now()
    db_action = DisciplinaryAction(
        moderator_id=action.moderator_id,
        admin_id=admin_id,
        type=action.type,
        reason=action.reason,
        description=action.description,
        severity=action.severity,
        expires_at=to_utc_naive(action.expires_at),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(db_action)
    db.commit()
    db.refresh(db_action)
    return db_action


def get_disciplinary_action(db: Session, action_id: int) -> Optional[DisciplinaryAction]:
    return db.query(DisciplinaryAction).filter(DisciplinaryAction.id == action_id).first()


def get_moderator_disciplinary_actions(db: Session, moderator_id: int, limit: Optional[int] = None) -> List[DisciplinaryAction]:
    return db.query(DisciplinaryAction)\
        .filter(DisciplinaryAction.moderator_id == moderator_id)\
        .order_by(DisciplinaryAction.created_at.desc(), DisciplinaryAction.id.desc())\
        .limit(limit)\
        .all()


def get_all_disciplinary_actions(db: Session, limit: Optional[int] = None) -> List[DisciplinaryAction]:
    return db.query(DisciplinaryAction)\
        .order_by(DisciplinaryAction.created_at.desc(), DisciplinaryAction.id.desc())\
        .limit(limit)\
        .all()


def get_active_disciplinary_actions(
    db: Session,
    moderator_id: int,
    now: Optional[datetime] = None,
) -> List[DisciplinaryAction]:
    cutoff = to_utc_naive(now) if now else utc_now()
    return db.query(DisciplinaryAction)\
        .filter(
            DisciplinaryAction.moderator_id == moderator_id,
            DisciplinaryAction.is_active == True,
            or_(DisciplinaryAction.expires_at.is_(None), DisciplinaryAction.expires_at > cutoff),
        )\
        .order_by(DisciplinaryAction.created_at.desc(), DisciplinaryAction.id.desc())\
        .all()


def update_disciplinary_action(
    db: Session,
    action_id: int,
    updates: DisciplinaryActionUpdate,
) -> Optional[DisciplinaryAction]:
    db_action = get_disciplinary_action(db, action_id)
    if not db_action:
        return None

    for field, value in updates.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        if field == "expires_at":
            value = to_utc_naive(value)
        setattr(db_action, field, value)
    db_action.updated_at = utc_now()

    db.commit()
    db.refresh(db_action)
    return db_action


def deactivate_disciplinary_action(db: Session, action_id: int) -> Optional[DisciplinaryAction]:
    db_action = get_disciplinary_action(db, action_id)
    if not db_action:
        return None
    db_action.is_active = False
    db_action.updated_at = utc_now()
    db.commit()
    db.refresh(db_action)
    return db_action


def expire_disciplinary_actions(db: Session, now: Optional[datetime] = None) -> int:
    """
    Deactivate every active action whose expires_at has passed.

    Returns:
        int: number of actions deactivated
    """
    cutoff = to_utc_naive(now) if now else utc_now()
    stmt = update(DisciplinaryAction)\
        .where(
            DisciplinaryAction.is_active == True,
            DisciplinaryAction.expires_at.is_not(None),
            DisciplinaryAction.expires_at <= cutoff,
        )\
        .values(is_active=False, updated_at=cutoff)\
        .execution_options(synchronize_session=False)

    result = db.execute(stmt)
    db.commit()
    if result.rowcount:
        logger.info(f"Expired {result.rowcount} disciplinary actions")
    return result.rowcount
