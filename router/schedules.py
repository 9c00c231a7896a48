from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from db import get_db
from dependencies import allow_admin, get_client_ip, get_current_user
from models import User
from schemas import ShiftScheduleCreate, ShiftScheduleOut, ShiftScheduleUpdate
from services.admin_service import log_admin_action
from services.schedule_service import (
    create_schedule,
    get_all_schedules,
    get_schedules_by_team,
    get_user_schedule,
    update_schedule,
)
from services.user_service import get_user

router = APIRouter(prefix="/api/schedules", tags=["Shift Schedules"])


@router.get("", response_model=List[ShiftScheduleOut])
def list_schedules(
    team: Optional[str] = Query(None),
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """All schedules ordered by agent name, optionally narrowed to one team."""
    if team:
        return get_schedules_by_team(db, team)
    return get_all_schedules(db, active_only=active_only)


@router.get("/my-schedule", response_model=Optional[ShiftScheduleOut])
def read_my_schedule(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_user_schedule(db, current_user.id)


@router.post("", response_model=ShiftScheduleOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(allow_admin)])
def add_schedule(
    request: Request,
    schedule: ShiftScheduleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not get_user(db, schedule.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    db_schedule = create_schedule(db, schedule)
    log_admin_action(
        db,
        admin_id=current_user.id,
        action="create_schedule",
        target_user_id=schedule.user_id,
        details=f"Schedule {db_schedule.id} for team {db_schedule.team}",
        ip_address=get_client_ip(request),
    )
    return db_schedule


@router.patch("/{schedule_id}", response_model=ShiftScheduleOut, dependencies=[Depends(allow_admin)])
def edit_schedule(
    request: Request,
    updates: ShiftScheduleUpdate,
    schedule_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    db_schedule = update_schedule(db, schedule_id, updates)
    if not db_schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")

    log_admin_action(
        db,
        admin_id=current_user.id,
        action="update_schedule",
        target_user_id=db_schedule.user_id,
        details=f"Schedule {schedule_id}: {', '.join(sorted(updates.model_dump(exclude_unset=True)))}",
        ip_address=get_client_ip(request),
    )
    return db_schedule
