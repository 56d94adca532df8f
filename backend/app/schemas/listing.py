from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.internship_listing import ListingMode, ListingCategory


class ListingCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    company: str = "NexByte"
    location: str = Field(..., min_length=1)
    mode: ListingMode
    duration: str = Field(..., min_length=1)
    stipend: str = "Unpaid"
    skills: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    category: ListingCategory
    is_active: bool = True
    application_deadline: datetime
    max_applicants: int = Field(default=50, ge=1)


class ListingUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    mode: Optional[ListingMode] = None
    duration: Optional[str] = None
    stipend: Optional[str] = None
    skills: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    category: Optional[ListingCategory] = None
    is_active: Optional[bool] = None
    application_deadline: Optional[datetime] = None
    max_applicants: Optional[int] = Field(None, ge=1)


class ListingResponse(BaseModel):
    id: str
    title: str
    description: str
    company: str
    location: str
    mode: ListingMode
    duration: str
    stipend: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    category: ListingCategory
    is_active: bool
    application_deadline: datetime
    max_applicants: int
    current_applicants: int
    posted_by_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
