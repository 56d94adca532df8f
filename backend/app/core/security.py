"""
Passwords and access tokens.

Tokens carry {sub: user id, role, type: "access"}; there are no refresh
tokens, a session simply lasts ACCESS_TOKEN_EXPIRE_MINUTES.
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import uuid

from jose import JWTError, jwt
import bcrypt
from fastapi import HTTPException, status

from app.core.config import settings

# bcrypt ignores everything past 72 bytes and newer releases refuse it outright
_BCRYPT_MAX_BYTES = 72


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode('utf-8')[:_BCRYPT_MAX_BYTES],
        hashed_password.encode('utf-8')
    )


def get_password_hash(password: str) -> str:
    """bcrypt hash, cost taken from BCRYPT_ROUNDS"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode('utf-8')[:_BCRYPT_MAX_BYTES], salt).decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.utcnow() + lifetime, "type": "access"}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user_id: str, role: str) -> str:
    """Access token carrying the {id, role} claim the role checks rely on"""
    return create_access_token({"sub": str(user_id), "role": role})


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; 401 on any failure"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Token is not valid")


def decode_access_token(token: str) -> str:
    """Return the user id of a valid access token"""
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    try:
        uuid.UUID(str(user_id))
    except ValueError:
        raise _unauthorized("Invalid token payload")

    return user_id
