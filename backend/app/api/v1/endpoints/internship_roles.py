"""
Internship roles (admin)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from app.core.database import get_db
from app.models.user import User
from app.models.internship_role import InternshipRole
from app.schemas.internship_role import InternshipRoleCreate, InternshipRoleUpdate, InternshipRoleResponse
from app.modules.auth.dependencies import get_current_admin
from app.services.crud_service import role_crud

router = APIRouter(prefix="/internship-roles", tags=["Internship Roles"])


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: str = None):
    query = select(InternshipRole.id).where(InternshipRole.name == name)
    if exclude_id:
        query = query.where(InternshipRole.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Role with this name already exists"
        )


@router.get("", response_model=List[InternshipRoleResponse])
async def list_roles(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await role_crud.list(db, order_by=InternshipRole.name)


@router.post("", response_model=InternshipRoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: InternshipRoleCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await _ensure_name_free(db, role_data.name)
    return await role_crud.create(db, role_data.model_dump())


@router.put("/{role_id}", response_model=InternshipRoleResponse)
async def update_role(
    role_id: str,
    role_data: InternshipRoleUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_crud.get_or_404(db, role_id)
    values = role_data.model_dump(exclude_unset=True)
    if "name" in values:
        await _ensure_name_free(db, values["name"], exclude_id=role_id)
    return await role_crud.update(db, role, values)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    role = await role_crud.get_or_404(db, role_id)
    await role_crud.delete(db, role)
