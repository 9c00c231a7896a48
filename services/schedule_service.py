"""
Schedule Service - weekly shift schedules
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from models import ShiftSchedule
from schemas import ShiftScheduleCreate, ShiftScheduleUpdate
from services.timezone_utils import utc_now


def get_all_schedules(db: Session, active_only: bool = False, limit: Optional[int] = None) -> List[ShiftSchedule]:
    query = db.query(ShiftSchedule)
    if active_only:
        query = query.filter(ShiftSchedule.is_active == True)
    return query.order_by(ShiftSchedule.agent_name, ShiftSchedule.id).limit(limit).all()


def get_schedules_by_team(db: Session, team: str, limit: Optional[int] = None) -> List[ShiftSchedule]:
    return db.query(ShiftSchedule)\
        .filter(ShiftSchedule.team == team)\
        .order_by(ShiftSchedule.agent_name, ShiftSchedule.id)\
        .limit(limit)\
        .all()


def get_schedule(db: Session, schedule_id: int) -> Optional[ShiftSchedule]:
    return db.query(ShiftSchedule).filter(ShiftSchedule.id == schedule_id).first()


def get_user_schedule(db: Session, user_id: int) -> Optional[ShiftSchedule]:
    # Latest row wins when an admin has created several
    return db.query(ShiftSchedule)\
        .filter(ShiftSchedule.user_id == user_id)\
        .order_by(ShiftSchedule.created_at.desc(), ShiftSchedule.id.desc())\
        .first()


def create_schedule(db: Session, schedule: ShiftScheduleCreate) -> ShiftSchedule:
    now = utc_now()
    db_schedule = ShiftSchedule(
        **schedule.model_dump(),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(db_schedule)
    db.commit()
    db.refresh(db_schedule)
    return db_schedule


def update_schedule(db: Session, schedule_id: int, updates: ShiftScheduleUpdate) -> Optional[ShiftSchedule]:
    db_schedule = get_schedule(db, schedule_id)
    if not db_schedule:
        return None

    for field, value in updates.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(db_schedule, field, value)
    db_schedule.updated_at = utc_now()

    db.commit()
    db.refresh(db_schedule)
    return db_schedule
