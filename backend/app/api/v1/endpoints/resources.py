"""
Learning resources for members and interns
"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.models.resource import Resource, ResourceType, ResourceCategory, ResourceDifficulty
from app.schemas.resource import ResourceCreate, ResourceUpdate, ResourceResponse
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.crud_service import resource_crud

router = APIRouter(prefix="/resources", tags=["Resources"])


@router.get("", response_model=List[ResourceResponse])
async def list_resources(
    category: Optional[ResourceCategory] = Query(None),
    resource_type: Optional[ResourceType] = Query(None, alias="type"),
    difficulty: Optional[ResourceDifficulty] = Query(None),
    current_user: User = Depends(require_permission("resources", "list")),
    db: AsyncSession = Depends(get_db)
):
    filters = []
    if category:
        filters.append(Resource.category == category)
    if resource_type:
        filters.append(Resource.type == resource_type)
    if difficulty:
        filters.append(Resource.difficulty == difficulty)
    return await resource_crud.list(db, *filters, order_by=Resource.created_at.desc())


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str,
    current_user: User = Depends(require_permission("resources", "read")),
    db: AsyncSession = Depends(get_db)
):
    return await resource_crud.get_or_404(db, resource_id)


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    resource_data: ResourceCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await resource_crud.create(db, resource_data.model_dump())


@router.put("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: str,
    resource_data: ResourceUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    resource = await resource_crud.get_or_404(db, resource_id)
    return await resource_crud.update(db, resource, resource_data.model_dump(exclude_unset=True))


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    resource = await resource_crud.get_or_404(db, resource_id)
    await resource_crud.delete(db, resource)
