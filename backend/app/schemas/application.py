from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict
from datetime import datetime

from app.models.internship_application import ApplicationStatus


class ApplicationUpdate(BaseModel):
    """Admin review of an application"""
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class ApplicationResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: str
    role: str
    education: str
    experience: str
    skills: str
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    listing_id: Optional[str] = None
    internship_title: str
    status: ApplicationStatus
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    date_applied: datetime

    class Config:
        from_attributes = True


class ApplicationListResponse(BaseModel):
    items: List[ApplicationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ApplicationStats(BaseModel):
    total: int
    by_status: Dict[str, int] = Field(default_factory=dict)
    recent: int = Field(0, description="Applications in the last 7 days")
