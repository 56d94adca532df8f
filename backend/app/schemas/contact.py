from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    mobile: str = Field(..., pattern=r'^\d{10}$', description="10-digit mobile number")
    message: str = Field(..., min_length=1)


class ContactResponse(BaseModel):
    id: str
    name: str
    email: str
    mobile: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
