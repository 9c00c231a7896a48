from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from db import get_db
from dependencies import get_current_user
from models import User
from schemas import LoginLogOut, UserStatsOut
from services.login_service import get_user_login_history
from services.user_service import get_user_stats

router = APIRouter(prefix="/api/user", tags=["User"])


@router.get("/stats", response_model=UserStatsOut)
def read_my_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Attendance summary for the current month plus the latest logins."""
    return get_user_stats(db, current_user.id)


@router.get("/login-history", response_model=List[LoginLogOut])
def read_my_login_history(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_user_login_history(db, current_user.id, limit=limit)
