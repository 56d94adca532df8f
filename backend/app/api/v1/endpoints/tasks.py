"""
Project tasks.

- admins list, create and delete tasks
- any authenticated user may read a task
- the assignee or an admin may update it; moving to Done stamps completed_at
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import List, Optional

from app.core.database import get_db
from app.models.user import User
from app.models.task import Task, TaskStatus
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.modules.auth.permissions import is_allowed
from app.services.crud_service import task_crud, project_crud, user_crud

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    project_id: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    filters = [Task.project_id == project_id] if project_id else []
    return await task_crud.list(db, *filters, order_by=Task.created_at.desc())


@router.get("/mine", response_model=List[TaskResponse])
async def list_my_tasks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Tasks assigned to the caller"""
    return await task_crud.list(db, Task.assigned_to_id == current_user.id, order_by=Task.created_at.desc())


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await project_crud.get_or_404(db, task_data.project_id)
    await user_crud.get_or_404(db, task_data.assigned_to_id)

    values = task_data.model_dump()
    values["created_by_id"] = admin.id
    if task_data.status == TaskStatus.DONE:
        values["completed_at"] = datetime.utcnow()
    return await task_crud.create(db, values)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await task_crud.get_or_404(db, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    task = await task_crud.get_or_404(db, task_id)

    is_assignee = task.assigned_to_id == current_user.id
    if not is_allowed(current_user.role, "tasks", "update") and not (
        is_assignee and is_allowed(current_user.role, "tasks", "update_own")
    ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    values = task_data.model_dump(exclude_unset=True)
    if "status" in values:
        if values["status"] == TaskStatus.DONE and task.status != TaskStatus.DONE:
            values["completed_at"] = datetime.utcnow()
        elif values["status"] != TaskStatus.DONE:
            values["completed_at"] = None

    return await task_crud.update(db, task, values)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    task = await task_crud.get_or_404(db, task_id)
    await task_crud.delete(db, task)
    return {"message": "Task removed"}
