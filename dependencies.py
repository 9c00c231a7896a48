from fastapi.security import OAuth2PasswordBearer
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from db import get_db
from models import User
from auth import decode_access_token, is_token_revoked
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_token_payload(token: str = Depends(oauth2_scheme)) -> dict:
    return decode_access_token(token)


def get_current_user(payload: dict = Depends(get_token_payload), db: Session = Depends(get_db)):
    """
    Resolve the caller of this request from its bearer token.

    Session identity travels with every request; nothing about the logged-in
    user is kept between requests.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    subject = payload.get("sub")
    role = payload.get("role")
    jti = payload.get("jti")

    if subject is None or role is None:
        logger.warning("Invalid token payload: missing sub or role")
        raise credentials_exception

    if jti and is_token_revoked(db, jti):
        logger.warning(f"User {subject} attempted access with revoked token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked. Please login again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"User not found: {subject}")
        raise credentials_exception

    if not user.is_active:
        logger.warning(f"Deactivated user {user.email} attempted access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    if user.role != role:
        logger.warning(f"Role mismatch for user {user.email}: token={role}, db={user.role}")
        raise credentials_exception

    return user


def get_client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For when behind the proxy
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_user_agent(request: Request):
    return request.headers.get("user-agent")


class RoleChecker:
    def __init__(self, allowed_roles):
        self.allowed_roles = set(allowed_roles)

    def __call__(self, user: User = Depends(get_current_user)):
        if user.role not in self.allowed_roles:
            logger.warning(f"Unauthorized access attempt: {user.email} tried to access role={self.allowed_roles}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted",
            )
        return True

allow_admin = RoleChecker(["admin"])
allow_moderator = RoleChecker(["moderator"])
