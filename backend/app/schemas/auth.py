from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

from app.models.user import UserRole, InternshipStatus, InternType, OfferStatus


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    role: UserRole
    is_active: bool
    credits: Optional[int] = 0
    internship_status: InternshipStatus
    current_internship_id: Optional[str] = None
    intern_type: Optional[InternType] = None
    offer_status: OfferStatus = OfferStatus.PENDING
    client_id: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
