"""
Disciplinary Router - warnings and strikes
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from sqlalchemy.orm import Session
from typing import List

from db import get_db
from dependencies import allow_admin, get_client_ip, get_current_user
from models import User
from schemas import DisciplinaryActionCreate, DisciplinaryActionOut, DisciplinaryActionUpdate
from services.admin_service import log_admin_action
from services.disciplinary_service import (
    create_disciplinary_action,
    deactivate_disciplinary_action,
    get_active_disciplinary_actions,
    get_all_disciplinary_actions,
    get_moderator_disciplinary_actions,
    update_disciplinary_action,
)
from services.user_service import get_user

router = APIRouter(prefix="/api/disciplinary", tags=["Disciplinary Actions"])


# ============================================================================
# MODERATOR VIEW
# ============================================================================

@router.get("/my", response_model=List[DisciplinaryActionOut])
def read_my_active_actions(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_active_disciplinary_actions(db, current_user.id)


# ============================================================================
# ADMIN MANAGEMENT
# ============================================================================

@router.get("", response_model=List[DisciplinaryActionOut], dependencies=[Depends(allow_admin)])
def list_actions(db: Session = Depends(get_db)):
    return get_all_disciplinary_actions(db)


@router.get("/moderator/{moderator_id}", response_model=List[DisciplinaryActionOut], dependencies=[Depends(allow_admin)])
def list_moderator_actions(
    moderator_id: int = Path(...),
    active_only: bool = False,
    db: Session = Depends(get_db)
):
    if active_only:
        return get_active_disciplinary_actions(db, moderator_id)
    return get_moderator_disciplinary_actions(db, moderator_id)


@router.post("", response_model=DisciplinaryActionOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(allow_admin)])
def issue_action(
    request: Request,
    action: DisciplinaryActionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    moderator = get_user(db, action.moderator_id)
    if not moderator or moderator.role != "moderator":
        raise HTTPException(status_code=404, detail="Moderator not found")

    db_action = create_disciplinary_action(db, current_user.id, action)
    log_admin_action(
        db,
        admin_id=current_user.id,
        action=f"issue_{action.type}",
        target_user_id=action.moderator_id,
        details=action.reason,
        ip_address=get_client_ip(request),
    )
    return db_action


@router.patch("/{action_id}", response_model=DisciplinaryActionOut, dependencies=[Depends(allow_admin)])
def edit_action(
    request: Request,
    updates: DisciplinaryActionUpdate,
    action_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    db_action = update_disciplinary_action(db, action_id, updates)
    if not db_action:
        raise HTTPException(status_code=404, detail="Disciplinary action not found")

    log_admin_action(
        db,
        admin_id=current_user.id,
        action="update_disciplinary_action",
        target_user_id=db_action.moderator_id,
        details=f"Action {action_id}",
        ip_address=get_client_ip(request),
    )
    return db_action


@router.post("/{action_id}/deactivate", response_model=DisciplinaryActionOut, dependencies=[Depends(allow_admin)])
def deactivate_action(
    request: Request,
    action_id: int = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    db_action = deactivate_disciplinary_action(db, action_id)
    if not db_action:
        raise HTTPException(status_code=404, detail="Disciplinary action not found")

    log_admin_action(
        db,
        admin_id=current_user.id,
        action="deactivate_disciplinary_action",
        target_user_id=db_action.moderator_id,
        details=f"Action {action_id}",
        ip_address=get_client_ip(request),
    )
    return db_action
