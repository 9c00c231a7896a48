"""
Session tokens for Moderator Hub.

A token identifies one dashboard session: `sub` is the user id, `role` the
role the user had at login and `jti` the id written to token_blacklist on
logout. Requests are authorised from the token alone; nothing about a
session is kept in process memory.
"""

import os
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from dotenv import load_dotenv
from fastapi import HTTPException, status
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import TokenBlacklist, User

load_dotenv()

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY environment variable not set")

ALGORITHM = "HS256"
# One working shift by default
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 12 * 60))


# ============================================================================
# PASSWORDS
# ============================================================================

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


# ============================================================================
# ISSUE / DECODE
# ============================================================================

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token for `user` carrying its id, role and a fresh jti."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(user.id),
        "role": user.role,
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def token_expiry(payload: dict) -> datetime:
    # Naive UTC, like every stored timestamp
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None)


# ============================================================================
# REVOCATION
# ============================================================================

def is_token_revoked(db: Session, jti: str) -> bool:
    return db.query(TokenBlacklist.id).filter(TokenBlacklist.jti == jti).first() is not None


def revoke_token(db: Session, payload: dict, user_id: int, reason: str = "user_logout") -> bool:
    """
    Blacklist the token's jti.

    Returns:
        True when this call revoked the token, False when it was already
        revoked (for example by a concurrent logout) or carries no jti.
    """
    jti = payload.get("jti")
    if not jti:
        return False

    db.add(TokenBlacklist(
        jti=jti,
        user_id=user_id,
        token_exp=token_expiry(payload),
        reason=reason,
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Token {jti} for user {user_id} was already revoked")
        return False
    return True
