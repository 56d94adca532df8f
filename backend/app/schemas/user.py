from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional

from app.models.user import UserRole, InternshipStatus, InternType, OfferStatus


class UserCreate(BaseModel):
    """Admin creates a user account"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.MEMBER
    intern_type: Optional[InternType] = None
    client_id: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    credits: Optional[int] = Field(None, ge=0)
    internship_status: Optional[InternshipStatus] = None
    intern_type: Optional[InternType] = None
    client_id: Optional[str] = None


class InternProfileUpdate(BaseModel):
    """Fields an intern may change on their own profile (camelCase accepted)"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, max_length=100, alias="firstName")
    last_name: Optional[str] = Field(None, max_length=100, alias="lastName")
    phone: Optional[str] = Field(None, max_length=20)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None


class InternProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None


class OfferRejection(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class OfferResponse(BaseModel):
    message: str
    offer_status: OfferStatus
