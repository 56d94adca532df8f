from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.project import ProjectStatus, ClientType


class ProjectCreate(BaseModel):
    project_name: str = Field(..., min_length=1, max_length=255)
    project_type: str = Field(..., min_length=1, max_length=100)
    project_description: str = Field(..., min_length=1)
    total_budget: float = Field(..., ge=0)
    project_deadline: datetime
    client_type: ClientType = ClientType.NON_CLIENT
    associated_client_id: Optional[str] = None
    assigned_to_id: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PENDING


class ProjectUpdate(BaseModel):
    project_name: Optional[str] = Field(None, min_length=1, max_length=255)
    project_type: Optional[str] = Field(None, min_length=1, max_length=100)
    project_description: Optional[str] = None
    total_budget: Optional[float] = Field(None, ge=0)
    project_deadline: Optional[datetime] = None
    client_type: Optional[ClientType] = None
    associated_client_id: Optional[str] = None
    assigned_to_id: Optional[str] = None
    status: Optional[ProjectStatus] = None


class ProjectResponse(BaseModel):
    id: str
    project_name: str
    project_type: str
    project_description: str
    total_budget: float
    project_deadline: datetime
    client_type: ClientType
    associated_client_id: Optional[str] = None
    assigned_to_id: Optional[str] = None
    status: ProjectStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
