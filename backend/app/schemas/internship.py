from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.models.internship import InternshipState
from app.schemas.certificate import CamelModel, CertificateResponse


class InternshipCreate(BaseModel):
    intern_id: str
    internship_title: str = Field(..., min_length=1, max_length=255)
    application_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    notes: Optional[str] = None


class InternshipProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0, le=100)
    notes: Optional[str] = None


class InternshipResponse(BaseModel):
    id: str
    intern_id: str
    application_id: Optional[str] = None
    internship_title: str
    status: InternshipState
    start_date: datetime
    end_date: Optional[datetime] = None
    progress: int = 0
    notes: Optional[str] = None
    certificate_ref: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InternshipListResponse(BaseModel):
    """Paginated list of internships"""
    items: List[InternshipResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class InternshipCompleteResponse(BaseModel):
    message: str
    internship: InternshipResponse
    certificate: CertificateResponse


class MyInternshipResponse(CamelModel):
    """Latest completed internship for the calling intern (camelCase keys)"""
    internship: InternshipResponse
    certificate: Optional[CertificateResponse] = None
    certificate_data: Optional[Dict[str, Any]] = None
    cloudinary_url: Optional[str] = None


class InternshipProgressResponse(BaseModel):
    message: str
    internship: InternshipResponse
    certificate: Optional[CertificateResponse] = None


class CompletionCheckResponse(BaseModel):
    message: str
    completed: int
    certificates_backfilled: int = 0
    nearing_completion: int
    timestamp: datetime
