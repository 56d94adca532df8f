from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.task import TaskStatus


class TaskCreate(BaseModel):
    project_id: str
    description: str = Field(..., min_length=1)
    assigned_to_id: str
    status: TaskStatus = TaskStatus.TODO
    cost: float = Field(default=0, ge=0)
    deadline: Optional[datetime] = None


class TaskUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[TaskStatus] = None
    assigned_to_id: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    deadline: Optional[datetime] = None


class TaskResponse(BaseModel):
    id: str
    project_id: str
    description: str
    status: TaskStatus
    assigned_to_id: str
    created_by_id: Optional[str] = None
    cost: Optional[float] = 0
    deadline: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
