"""
Unit Tests for Security Module
Tests for: password hashing, JWT tokens
"""
import pytest
from datetime import timedelta
from jose import jwt
from fastapi import HTTPException

from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from app.core.config import settings


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        hashed = get_password_hash("testpassword123")

        assert hashed != "testpassword123"
        assert len(hashed) > 0

    def test_hash_password_different_each_time(self):
        # Bcrypt generates different salts
        assert get_password_hash("testpassword123") != get_password_hash("testpassword123")

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_without_hash(self):
        """SSO-only accounts have no password"""
        assert verify_password("anything", None) is False


class TestJWTTokens:
    """Test JWT creation and decoding"""

    def test_access_token_round_trip(self):
        token = create_access_token({"sub": "user-1", "email": "a@b.fr", "role": "teacher"})
        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["role"] == "teacher"
        assert payload["type"] == ACCESS_TOKEN_TYPE

    def test_refresh_token_uses_refresh_secret(self):
        token = create_refresh_token({"sub": "user-1"})

        payload = jwt.decode(token, settings.refresh_secret_key, algorithms=[settings.JWT_ALGORITHM])
        assert payload["type"] == REFRESH_TOKEN_TYPE
        assert decode_token(token, token_type=REFRESH_TOKEN_TYPE)["sub"] == "user-1"

    def test_refresh_token_rejected_as_access_token(self):
        token = create_refresh_token({"sub": "user-1"})

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_access_token_rejected_as_refresh_token(self):
        token = create_access_token({"sub": "user-1"})

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token, token_type=REFRESH_TOKEN_TYPE)
        assert exc_info.value.status_code == 401

    def test_expired_token(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_tampered_token(self):
        token = create_access_token({"sub": "user-1"})

        with pytest.raises(HTTPException):
            decode_token(token[:-4] + "abcd")
