"""
Certificate API Endpoints

Public:
- GET /certificates/verify/{certificate_id}  - Is this certificate genuine?
- GET /certificates/view/{certificate_id}    - Certificate with decrypted payload

Authenticated:
- GET /certificates/me                       - Calling intern's latest certificate
- GET /certificates/intern/{intern_id}       - Admin view of an intern's certificate
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import CertificateNotFoundError
from app.core.logging_config import logger
from app.models.user import User, UserRole
from app.schemas.auth import UserResponse
from app.schemas.certificate import (
    CertificateResponse,
    CertificateVerifyResponse,
    CertificateViewResponse,
    InternCertificateResponse,
    VerifiedCertificate,
)
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.certificate_service import certificate_service

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get(
    "/verify/{certificate_id}",
    response_model=CertificateVerifyResponse,
    responses={404: {"description": "Certificate not found"}},
)
async def verify_certificate(
    certificate_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Public verification of a certificate id"""
    verified = await certificate_service.verify_certificate(db, certificate_id)
    if verified is None:
        logger.log_certificate_event(certificate_id, "verification failed: not found", success=False)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"valid": False, "message": "Certificate not found"},
        )

    return CertificateVerifyResponse(
        valid=True,
        certificate=VerifiedCertificate(**verified),
        message="Certificate is valid",
    )


@router.get("/view/{certificate_id}", response_model=CertificateViewResponse)
async def view_certificate(
    certificate_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Certificate record with its decrypted payload.

    A payload that cannot be decrypted surfaces as a 500
    CERTIFICATE_DECRYPTION_FAILED error.
    """
    certificate = await certificate_service.get_by_certificate_id(db, certificate_id)
    if certificate is None:
        raise CertificateNotFoundError(certificate_id)

    data = certificate_service.decrypt(certificate)
    return CertificateViewResponse(
        certificate=CertificateResponse.model_validate(certificate),
        data=data,
    )


@router.get("/me", response_model=InternCertificateResponse)
async def get_my_certificate(
    current_user: User = Depends(require_permission("certificates", "read_own")),
    db: AsyncSession = Depends(get_db)
):
    certificate = await certificate_service.get_latest_for_intern(db, current_user.id)
    return InternCertificateResponse(
        user=UserResponse.model_validate(current_user),
        certificate=CertificateResponse.model_validate(certificate) if certificate else None,
    )


@router.get("/intern/{intern_id}", response_model=InternCertificateResponse)
async def get_intern_certificate(
    intern_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    intern = await db.get(User, intern_id)
    if intern is None or intern.role != UserRole.INTERN:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Intern not found"
        )

    certificate = await certificate_service.get_latest_for_intern(db, intern.id)
    return InternCertificateResponse(
        user=UserResponse.model_validate(intern),
        certificate=CertificateResponse.model_validate(certificate) if certificate else None,
    )
