from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class EmailTemplateUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=500)
    body: Optional[str] = Field(None, min_length=1)
    is_enabled: Optional[bool] = None


class EmailTemplateResponse(BaseModel):
    id: str
    key: str
    subject: str
    body: str
    is_enabled: bool

    class Config:
        from_attributes = True


class EmailLogResponse(BaseModel):
    id: str
    recipient: str
    subject: str
    template_key: Optional[str] = None
    status: str
    error: Optional[str] = None
    sent_at: datetime

    class Config:
        from_attributes = True


class TestEmailRequest(BaseModel):
    email: EmailStr
    template_key: str = Field(..., min_length=1)
