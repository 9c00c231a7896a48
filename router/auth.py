"""
Auth Router - registration, login and login/logout tracking
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from auth import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token, revoke_token
from db import get_db
from dependencies import get_client_ip, get_current_user, get_token_payload, get_user_agent
from models import User
from schemas import (
    LoginLogOut,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    Token,
    TrackLoginRequest,
    UserOut,
)
from services.login_service import create_login_log, update_logout_time
from services.user_service import authenticate_user, create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _issue_token(user: User) -> Token:
    access_token = create_access_token(user)
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserOut.model_validate(user),
    )


# ============================================================================
# REGISTER / LOGIN
# ============================================================================

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Self-service registration. New accounts are always moderators;
    admins are created with create_admin.py.
    """
    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    return create_user(
        db,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role="moderator",
    )


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    if not user:
        logger.info(f"Failed login for {payload.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    logger.info(f"User {user.email} logged in")
    return _issue_token(user)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # OAuth2 form login used by the interactive API docs; username is the email.
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _issue_token(user)


# ============================================================================
# SESSION TRACKING
# ============================================================================

@router.post("/track-login", response_model=LoginLogOut, status_code=status.HTTP_201_CREATED)
def track_login(
    request: Request,
    payload: Optional[TrackLoginRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record a login for the dashboard session that was just opened."""
    return create_login_log(
        db,
        user_id=current_user.id,
        ip_address=get_client_ip(request),
        location=payload.location if payload else None,
        user_agent=get_user_agent(request),
    )


@router.post("/logout", response_model=LogoutResponse)
def logout(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Close the most recent open login record and revoke the current token.
    """
    session_closed = update_logout_time(db, current_user.id)

    revoked = revoke_token(db, payload, current_user.id)

    logger.info(f"User {current_user.email} logged out (session_closed={session_closed}, revoked={revoked})")

    return LogoutResponse(
        message="Logged out successfully",
        success=True,
        session_closed=session_closed,
    )


@router.get("/user", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
