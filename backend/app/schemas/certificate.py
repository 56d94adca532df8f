"""
Certificate schemas.

These are consumed by the public certificate page, so they serialize
with camelCase keys.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any
from datetime import datetime

from app.schemas.auth import UserResponse


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CertificateResponse(CamelModel):
    id: str
    certificate_id: str
    intern_id: str
    internship_id: str
    certificate_url: str
    cloudinary_url: Optional[str] = None
    issued_at: datetime


class VerifiedCertificate(CamelModel):
    certificate_id: str
    intern_name: str
    internship_title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    issued_at: datetime
    verification_url: str


class CertificateVerifyResponse(CamelModel):
    valid: bool
    certificate: Optional[VerifiedCertificate] = None
    message: Optional[str] = None


class CertificateViewResponse(CamelModel):
    certificate: CertificateResponse
    data: Dict[str, Any]


class InternCertificateResponse(BaseModel):
    """Intern account plus their latest certificate"""
    user: UserResponse
    certificate: Optional[CertificateResponse] = None
