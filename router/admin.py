"""
Admin Router - moderator oversight and analytics
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from db import get_db
from dependencies import allow_admin, get_client_ip, get_current_user
from models import User
from schemas import AdminActionOut, AdminStatsOut, AttendanceOut, LoginLogOut, UserOut, UserStatusUpdate
from services.admin_service import get_admin_actions, get_moderator_stats, log_admin_action
from services.attendance_service import get_attendance_stats, get_user_attendance_history
from services.login_service import get_login_stats, get_user_login_history
from services.user_service import get_all_moderators, get_user, update_user_status

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(allow_admin)])


@router.get("/moderators", response_model=List[UserOut])
def list_moderators(db: Session = Depends(get_db)):
    return get_all_moderators(db)


@router.patch("/users/{user_id}/status", response_model=UserOut)
def change_user_status(
    request: Request,
    update: UserStatusUpdate,
    user_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Soft-enable or disable an account. Admins cannot disable themselves."""
    if user_id == current_user.id and not update.is_active:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    user = update_user_status(db, user_id, update.is_active)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    log_admin_action(
        db,
        admin_id=current_user.id,
        action="activate_user" if update.is_active else "deactivate_user",
        target_user_id=user_id,
        ip_address=get_client_ip(request),
    )
    return user


@router.get("/stats", response_model=AdminStatsOut)
def read_stats(db: Session = Depends(get_db)):
    return {
        "moderators": get_moderator_stats(db),
        "attendance": get_attendance_stats(db),
        "logins": get_login_stats(db),
    }


@router.get("/users/{user_id}/attendance", response_model=List[AttendanceOut])
def read_user_attendance(
    user_id: int = Path(...),
    limit: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db)
):
    if not get_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return get_user_attendance_history(db, user_id, limit=limit)


@router.get("/users/{user_id}/logins", response_model=List[LoginLogOut])
def read_user_logins(
    user_id: int = Path(...),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    if not get_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return get_user_login_history(db, user_id, limit=limit)


@router.get("/actions", response_model=List[AdminActionOut])
def read_admin_actions(
    admin_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    return get_admin_actions(db, admin_id=admin_id, limit=limit)
