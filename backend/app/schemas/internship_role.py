from pydantic import BaseModel, Field
from typing import Optional, List


class InternshipRoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[str] = None
    requirements: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    mentor: Optional[str] = None
    max_interns: int = Field(default=5, ge=1)


class InternshipRoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[str] = None
    requirements: Optional[str] = None
    skills: Optional[List[str]] = None
    mentor: Optional[str] = None
    max_interns: Optional[int] = Field(None, ge=1)
    current_interns: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class InternshipRoleResponse(InternshipRoleCreate):
    id: str
    current_interns: int = 0
    is_active: bool = True

    class Config:
        from_attributes = True
