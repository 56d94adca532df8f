"""
Internship API Endpoints

Endpoints:
- GET  /internships                         - Admin list with status filter and pagination
- POST /internships                         - Admin starts an internship for an intern
- GET  /internships/me                      - Intern's latest completed internship and certificate
- PUT  /internships/progress/{id}           - Admin progress update (100 completes)
- PUT  /internships/complete/{id}           - Admin completion, issues the certificate
- POST /internships/check-completions       - Admin runs the completion sweep now
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from datetime import datetime
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import CertificateDecryptionError
from app.core.logging_config import logger
from app.models.user import User, UserRole, InternshipStatus
from app.models.internship import Internship, InternshipState
from app.schemas.certificate import CertificateResponse
from app.schemas.internship import (
    InternshipCreate,
    InternshipProgressUpdate,
    InternshipResponse,
    InternshipListResponse,
    InternshipCompleteResponse,
    InternshipProgressResponse,
    MyInternshipResponse,
    CompletionCheckResponse,
)
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.crud_service import internship_crud, user_crud
from app.services.certificate_service import certificate_service
from app.services.internship_completion import internship_completion_service
from app.utils.pagination import paginate

router = APIRouter(prefix="/internships", tags=["Internships"])


async def _mark_completed(db: AsyncSession, internship_id: str) -> bool:
    """
    Move an in-progress internship to completed.

    Returns False if it was not in progress, so two concurrent completions
    cannot both proceed.
    """
    now = datetime.utcnow()
    result = await db.execute(
        update(Internship)
        .where(
            Internship.id == internship_id,
            Internship.status == InternshipState.IN_PROGRESS,
        )
        .values(
            status=InternshipState.COMPLETED,
            end_date=func.coalesce(Internship.end_date, now),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        return False
    await db.commit()
    return True


@router.get("", response_model=InternshipListResponse)
async def list_internships(
    status_filter: Optional[str] = Query(None, alias="status", description="in_progress, completed or all"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="limit"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    query = select(Internship).order_by(Internship.created_at.desc())
    if status_filter and status_filter != "all":
        try:
            query = query.where(Internship.status == InternshipState(status_filter))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status '{status_filter}'"
            )

    return await paginate(db, query, page=page, page_size=page_size)


@router.post("", response_model=InternshipResponse, status_code=status.HTTP_201_CREATED)
async def create_internship(
    internship_data: InternshipCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Start an internship and mark the intern as in progress"""
    intern = await user_crud.get_or_404(db, internship_data.intern_id)
    if intern.role != UserRole.INTERN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is not an intern"
        )

    values = internship_data.model_dump(exclude_unset=True)
    values.setdefault("start_date", datetime.utcnow())
    internship = Internship(**values)
    db.add(internship)
    await db.flush()

    intern.internship_status = InternshipStatus.IN_PROGRESS
    intern.current_internship_id = internship.id

    await db.commit()
    await db.refresh(internship)

    logger.info(f"[Internships] Started '{internship.internship_title}' for {intern.email}")
    return internship


@router.get("/me", response_model=MyInternshipResponse)
async def get_my_internship(
    current_user: User = Depends(require_permission("internships", "read_own")),
    db: AsyncSession = Depends(get_db)
):
    """Latest completed internship with its decrypted certificate"""
    result = await db.execute(
        select(Internship)
        .where(
            Internship.intern_id == current_user.id,
            Internship.status == InternshipState.COMPLETED,
        )
        .order_by(Internship.created_at.desc())
        .limit(1)
    )
    internship = result.scalar_one_or_none()
    if internship is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No internship found"
        )

    certificate = None
    certificate_data = None
    if internship.certificate_ref:
        certificate = await certificate_service.find_existing(db, internship.intern_id, internship.id)
    if certificate is not None:
        try:
            certificate_data = certificate_service.decrypt(certificate)
        except CertificateDecryptionError:
            logger.warning(f"[Internships] Could not decrypt certificate {certificate.certificate_id}")

    return MyInternshipResponse(
        internship=InternshipResponse.model_validate(internship),
        certificate=CertificateResponse.model_validate(certificate) if certificate else None,
        certificate_data=certificate_data,
        cloudinary_url=certificate.cloudinary_url if certificate else None,
    )


@router.put("/progress/{internship_id}", response_model=InternshipProgressResponse)
async def update_progress(
    internship_id: str,
    progress_data: InternshipProgressUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Update progress; reaching 100 completes the internship and issues the certificate"""
    internship = await internship_crud.get_or_404(db, internship_id)

    internship.progress = progress_data.progress
    if progress_data.notes is not None:
        internship.notes = progress_data.notes
    await db.commit()

    if progress_data.progress >= 100 and internship.status != InternshipState.COMPLETED:
        if await _mark_completed(db, internship_id):
            certificate = await certificate_service.issue_certificate(db, internship_id)
            await db.refresh(internship)
            return InternshipProgressResponse(
                message="Internship completed and certificate generated",
                internship=InternshipResponse.model_validate(internship),
                certificate=CertificateResponse.model_validate(certificate) if certificate else None,
            )

    await db.refresh(internship)
    return InternshipProgressResponse(
        message="Progress updated successfully",
        internship=InternshipResponse.model_validate(internship),
    )


@router.put("/complete/{internship_id}", response_model=InternshipCompleteResponse)
async def complete_internship(
    internship_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Complete an internship and issue its certificate"""
    internship = await internship_crud.get(db, internship_id)
    if internship is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Internship not found"
        )

    if internship.status == InternshipState.COMPLETED:
        # A completion whose issuance failed may be retried
        if internship.certificate_ref is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Internship already completed"
            )
    elif not await _mark_completed(db, internship_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Internship already completed"
        )

    certificate = await certificate_service.issue_certificate(db, internship_id)
    if certificate is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate certificate"
        )

    await db.refresh(internship)
    logger.info(f"[Internships] {admin.email} completed internship {internship_id}")

    return InternshipCompleteResponse(
        message="Internship completed successfully",
        internship=InternshipResponse.model_validate(internship),
        certificate=CertificateResponse.model_validate(certificate),
    )


@router.post("/check-completions", response_model=CompletionCheckResponse)
async def check_completions(
    admin: User = Depends(get_current_admin),
):
    """Run the completion sweep immediately"""
    logger.info(f"[Internships] Manual completion check triggered by {admin.email}")
    results = await internship_completion_service.run_checks()
    return CompletionCheckResponse(
        message="Completion check completed successfully",
        completed=results["completed"],
        certificates_backfilled=results["certificates_backfilled"],
        nearing_completion=results["nearing_completion"],
        timestamp=datetime.utcnow(),
    )
