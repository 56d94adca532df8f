"""
Unit Tests for Security Module
Tests for: password hashing, JWT access tokens
"""
import pytest
from datetime import datetime, timedelta
from jose import jwt
from fastapi import HTTPException

from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_user_token,
    decode_token,
    decode_access_token,
)
from app.core.config import settings


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert len(hashed) > 0

    def test_hash_password_different_each_time(self):
        """Bcrypt salts every hash"""
        password = "testpassword123"

        assert get_password_hash(password) != get_password_hash(password)

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_hash_long_password_truncated(self):
        """Passwords beyond bcrypt's 72 bytes still verify"""
        long_password = "a" * 100
        hashed = get_password_hash(long_password)

        assert verify_password(long_password, hashed) is True

    def test_hash_unicode_password(self):
        password = "pässwörd-पासवर्ड"
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True


class TestAccessToken:
    """Test access token functions"""

    def test_access_token_has_type(self):
        token = create_access_token({"sub": "user123"})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["type"] == "access"

    def test_create_access_token_with_expiry(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(hours=1))

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        remaining = datetime.utcfromtimestamp(payload["exp"]) - datetime.utcnow()

        assert 3500 < remaining.total_seconds() < 3700

    def test_user_token_carries_id_and_role(self):
        token = create_user_token("7f0c6a3e-1f1b-4a55-9d43-0c6c1c1d2e3f", "intern")

        payload = decode_token(token)
        assert payload["sub"] == "7f0c6a3e-1f1b-4a55-9d43-0c6c1c1d2e3f"
        assert payload["role"] == "intern"


class TestDecodeToken:
    """Test token decoding"""

    def test_decode_invalid_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token("invalid_token_string")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token is not valid"

    def test_decode_expired_token(self):
        expired_token = jwt.encode(
            {"sub": "user123", "exp": datetime.utcnow() - timedelta(hours=1), "type": "access"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(HTTPException) as exc_info:
            decode_token(expired_token)

        assert exc_info.value.status_code == 401

    def test_decode_token_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user123", "exp": datetime.utcnow() + timedelta(hours=1)},
            "some-other-secret",
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(HTTPException):
            decode_token(token)


class TestDecodeAccessToken:
    """Access tokens resolve to a user id"""

    def test_returns_user_id(self):
        user_id = "7f0c6a3e-1f1b-4a55-9d43-0c6c1c1d2e3f"

        assert decode_access_token(create_user_token(user_id, "admin")) == user_id

    def test_rejects_other_token_types(self):
        token = jwt.encode(
            {"sub": "7f0c6a3e-1f1b-4a55-9d43-0c6c1c1d2e3f", "type": "refresh",
             "exp": datetime.utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.detail == "Invalid token type"

    @pytest.mark.parametrize("subject", [None, "user123"])
    def test_rejects_bad_subject(self, subject):
        claims = {} if subject is None else {"sub": subject}

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(create_access_token(claims))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token payload"
