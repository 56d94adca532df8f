"""
Projects. Admins manage all projects; members and interns list the
projects assigned to them.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.models.project import Project, ProjectStatus
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.modules.auth.permissions import is_allowed
from app.services.crud_service import project_crud

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All projects for admins, assigned projects for everyone else"""
    filters = []
    if status_filter:
        filters.append(Project.status == status_filter)

    if is_allowed(current_user.role, "projects", "list"):
        pass
    elif is_allowed(current_user.role, "projects", "list_own"):
        filters.append(Project.assigned_to_id == current_user.id)
    else:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    return await project_crud.list(db, *filters, order_by=Project.created_at.desc())


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await project_crud.create(db, project_data.model_dump())


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    project = await project_crud.get_or_404(db, project_id)
    if not is_allowed(current_user.role, "projects", "read") and project.assigned_to_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return project


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    project = await project_crud.get_or_404(db, project_id)
    return await project_crud.update(db, project, project_data.model_dump(exclude_unset=True))


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    project = await project_crud.get_or_404(db, project_id)
    await project_crud.delete(db, project)
    return {"message": "Project deleted successfully"}
