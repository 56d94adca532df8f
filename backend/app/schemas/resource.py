from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.resource import ResourceType, ResourceCategory, ResourceDifficulty


class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    type: ResourceType = ResourceType.DOCUMENTATION
    url: str = Field(..., min_length=1, max_length=1000)
    category: ResourceCategory = ResourceCategory.GENERAL
    difficulty: ResourceDifficulty = ResourceDifficulty.INTERMEDIATE
    tags: List[str] = Field(default_factory=list)


class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[ResourceType] = None
    url: Optional[str] = Field(None, max_length=1000)
    category: Optional[ResourceCategory] = None
    difficulty: Optional[ResourceDifficulty] = None
    tags: Optional[List[str]] = None


class ResourceResponse(ResourceCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
