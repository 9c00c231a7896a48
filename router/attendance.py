from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from db import get_db
from dependencies import get_client_ip, get_current_user, get_user_agent
from models import User
from schemas import AttendanceOut, MarkAttendanceRequest
from services.timezone_utils import to_utc_naive
from services.attendance_service import (
    get_attendance_by_date_range,
    get_today_attendance,
    get_user_attendance_history,
    mark_attendance,
)

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])


@router.post("/mark", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def mark_today(
    request: Request,
    payload: Optional[MarkAttendanceRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    record = mark_attendance(
        db,
        user_id=current_user.id,
        ip_address=get_client_ip(request),
        location=payload.location if payload else None,
        user_agent=get_user_agent(request),
    )
    if record is None:
        raise HTTPException(status_code=409, detail="Attendance already marked for today")
    return record


# Absent attendance is a normal state: the body is null
@router.get("/today", response_model=Optional[AttendanceOut])
def read_today(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_today_attendance(db, current_user.id)


@router.get("/history/{limit}", response_model=List[AttendanceOut])
def read_history(
    limit: int = Path(..., ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_user_attendance_history(db, current_user.id, limit=limit)


@router.get("/range", response_model=List[AttendanceOut])
def read_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if to_utc_naive(end) < to_utc_naive(start):
        raise HTTPException(status_code=400, detail="end cannot be before start")
    return get_attendance_by_date_range(db, current_user.id, start, end)
