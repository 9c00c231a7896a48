from datetime import timedelta

import pytest
from fastapi import HTTPException

from auth import create_access_token, decode_access_token, is_token_revoked, revoke_token
from services.user_service import create_user


def test_token_carries_user_id_role_and_jti(db):
    user = create_user(db, email="mod@company.com", password="Pwd#12345")
    payload = decode_access_token(create_access_token(user))

    assert payload["sub"] == str(user.id)
    assert payload["role"] == "moderator"
    assert payload["jti"]
    assert payload["exp"] > payload["iat"]


def test_each_token_gets_its_own_jti(db):
    user = create_user(db, email="mod@company.com", password="Pwd#12345")
    first = decode_access_token(create_access_token(user))
    second = decode_access_token(create_access_token(user))
    assert first["jti"] != second["jti"]


def test_expired_token_is_refused(db):
    user = create_user(db, email="mod@company.com", password="Pwd#12345")
    token = create_access_token(user, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401
    assert exc.value.detail == "Token expired"


def test_second_revoke_of_same_token_is_harmless(db):
    user = create_user(db, email="mod@company.com", password="Pwd#12345")
    payload = decode_access_token(create_access_token(user))

    assert revoke_token(db, payload, user.id) is True
    # A concurrent logout with the same token lands on the unique jti
    assert revoke_token(db, payload, user.id) is False
    assert is_token_revoked(db, payload["jti"]) is True

    # The session is still usable after the rollback
    other = create_user(db, email="other@company.com", password="Pwd#12345")
    assert other.id is not None


def test_revoke_without_jti_does_nothing(db):
    user = create_user(db, email="mod@company.com", password="Pwd#12345")
    assert revoke_token(db, {"sub": str(user.id), "role": "moderator"}, user.id) is False
