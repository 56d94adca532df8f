from fastapi import Depends, HTTPException, Header, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Callable, Optional

from app.core.database import get_db
from app.core.logging_config import set_user_id
from app.core.security import decode_access_token
from app.models.user import User, UserRole
from app.modules.auth.permissions import is_allowed

security = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    x_auth_token: Optional[str],
) -> str:
    """Bearer token first, then the legacy x-auth-token header"""
    if credentials and credentials.credentials:
        return credentials.credentials
    if x_auth_token:
        return x_auth_token
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No token, authorization denied",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_auth_token: Optional[str] = Header(None, alias="x-auth-token"),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""

    user_id = decode_access_token(_extract_token(credentials, x_auth_token))

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    # Rate limiter keys on this; logs pick it up from the context var
    request.state.user_id = str(user.id)
    set_user_id(str(user.id))

    return user


def require_permission(resource: str, action: str) -> Callable:
    """
    Build a dependency that allows the request only if the caller's role
    may perform `action` on `resource`.

    Usage:
        @router.get("/", dependencies=[Depends(require_permission("bills", "list"))])
    """
    async def permission_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if not is_allowed(current_user.role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied"
            )
        return current_user

    return permission_checker


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin only."
        )
    return current_user
