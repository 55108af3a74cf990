"""
Tests for the auth dependencies
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.config import settings
from app.core.dependencies import (
    authenticate_user,
    get_current_admin,
    get_current_user,
)
from app.core.security import create_access_token, decode_access_token, hash_password, verify_password


class TestPasswordHashing:
    """Tests for password hashing"""

    def test_verify_password_correct(self):
        hashed = hash_password("test_password")
        assert hashed != "test_password"
        assert verify_password("test_password", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("test_password")
        assert verify_password("wrong_password", hashed) is False


class TestTokens:
    """Tests for access token encoding"""

    def test_subject_is_user_id(self):
        token = create_access_token(42)
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "42"
        assert "exp" in payload
        assert decode_access_token(token) == 42

    def test_expired_token(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sub": "42", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "another-secret",
            algorithm=settings.ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_malformed_subject(self):
        token = jwt.encode(
            {"sub": "alice", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert decode_access_token(token) is None


class TestAuthentication:
    """Tests for authenticate_user"""

    def test_authenticate_user_success(self, db_session, alice):
        user = authenticate_user(db_session, "alice", "password123")
        assert user is not None
        assert user.id == alice.id

    def test_authenticate_user_by_email(self, db_session, alice):
        assert authenticate_user(db_session, "alice@example.com", "password123").id == alice.id

    def test_authenticate_user_wrong_password(self, db_session, alice):
        assert authenticate_user(db_session, "alice", "wrong_password") is None

    def test_authenticate_user_not_exists(self, db_session):
        assert authenticate_user(db_session, "nonexistent", "password123") is None


class TestGetCurrentUser:
    """Tests for get_current_user"""

    def test_valid_token(self, db_session, alice):
        user = get_current_user(token=create_access_token(alice.id), db=db_session)
        assert user.id == alice.id

    def test_invalid_token(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token="invalid_token", db=db_session)
        assert exc_info.value.status_code == 403

    def test_deleted_user(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(token=create_access_token(9999), db=db_session)
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "User not found"


class TestGetCurrentAdmin:
    """Tests for get_current_admin"""

    def test_admin_passes(self, admin_user):
        assert get_current_admin(current_user=admin_user) is admin_user

    def test_non_admin_rejected(self, alice):
        with pytest.raises(HTTPException) as exc_info:
            get_current_admin(current_user=alice)
        assert exc_info.value.status_code == 403
