from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class ClientBase(BaseModel):
    client_name: str = Field(..., min_length=1, max_length=255)
    contact_person: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    company_address: Optional[str] = None

    project_name: str = Field(..., min_length=1, max_length=255)
    project_type: Optional[str] = None
    project_requirements: Optional[str] = None
    project_deadline: Optional[datetime] = None
    total_budget: Optional[float] = Field(None, ge=0)

    billing_address: Optional[str] = None
    gst_number: Optional[str] = None
    payment_terms: Optional[str] = None
    payment_method: Optional[str] = None

    domain_registrar_login: Optional[str] = None
    web_hosting_login: Optional[str] = None
    logo_and_branding_files: Optional[str] = None
    content: Optional[str] = None

    srs_document: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    company_address: Optional[str] = None
    project_name: Optional[str] = Field(None, min_length=1, max_length=255)
    project_type: Optional[str] = None
    project_requirements: Optional[str] = None
    project_deadline: Optional[datetime] = None
    total_budget: Optional[float] = Field(None, ge=0)
    billing_address: Optional[str] = None
    gst_number: Optional[str] = None
    payment_terms: Optional[str] = None
    payment_method: Optional[str] = None
    domain_registrar_login: Optional[str] = None
    web_hosting_login: Optional[str] = None
    logo_and_branding_files: Optional[str] = None
    content: Optional[str] = None
    srs_document: Optional[str] = None


class ClientResponse(ClientBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
