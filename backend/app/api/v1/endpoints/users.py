"""
User management (admin only)
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional

from app.core.database import get_db
from app.core.security import get_password_hash
from app.core.logging_config import logger
from app.models.user import User, UserRole
from app.schemas.auth import UserResponse
from app.schemas.user import UserCreate, UserUpdate
from app.modules.auth.dependencies import get_current_admin
from app.services.crud_service import user_crud
from app.services.email_service import email_service

router = APIRouter(prefix="/users", tags=["Users"])


async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == email))
    return result.scalar_one_or_none() is not None


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """List all users (password hashes are never returned)"""
    filters = [User.role == role] if role else []
    return await user_crud.list(db, *filters, order_by=User.created_at.desc())


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a user and send the welcome email"""
    if await _email_taken(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )

    values = user_data.model_dump(exclude={"password"})
    values["hashed_password"] = get_password_hash(user_data.password)
    user = await user_crud.create(db, values)

    logger.info(f"[Users] {admin.email} created {user.email} ({user.role.value})")

    await email_service.send_template(
        db, "welcome", user.email,
        {"name": user.display_name, "email": user.email, "role": user.role.value},
    )
    await db.commit()

    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await user_crud.get_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_crud.get_or_404(db, user_id)
    values = user_data.model_dump(exclude_unset=True, exclude={"password"})

    if "email" in values and values["email"] != user.email and await _email_taken(db, values["email"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already in use"
        )
    if user_data.password:
        values["hashed_password"] = get_password_hash(user_data.password)

    return await user_crud.update(db, user, values)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_crud.get_or_404(db, user_id)
    if user.id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )
    await user_crud.delete(db, user)
    return {"message": "User removed"}
