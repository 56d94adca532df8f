"""
Internship Application Endpoints

Public submission with resume upload; review is admin only.
"""

import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

import aiofiles
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request, UploadFile, File, Form
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import InvalidFileTypeError, FileTooLargeError
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.user import User, UserRole
from app.models.internship_application import InternshipApplication, ApplicationStatus
from app.models.internship_listing import InternshipListing
from app.schemas.application import (
    ApplicationUpdate,
    ApplicationResponse,
    ApplicationListResponse,
    ApplicationStats,
)
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.services.crud_service import application_crud, listing_crud
from app.services.email_service import email_service
from app.utils.pagination import paginate

router = APIRouter(prefix="/applications", tags=["Applications"])


def _safe_filename(filename: str) -> str:
    return Path(filename).name.replace(" ", "_")


async def read_resume(resume: UploadFile) -> Tuple[str, bytes]:
    """Check extension and size of an uploaded resume; nothing is written yet"""
    filename = _safe_filename(resume.filename or "")
    extension = Path(filename).suffix.lower()
    allowed = settings.ALLOWED_RESUME_EXTENSIONS
    if extension not in allowed:
        raise InvalidFileTypeError(extension or "unknown", allowed)

    content = await resume.read()
    if len(content) > settings.MAX_RESUME_SIZE_MB * 1024 * 1024:
        raise FileTooLargeError(settings.MAX_RESUME_SIZE_MB)

    return filename, content


async def store_resume(filename: str, content: bytes) -> str:
    """Write a validated resume; returns the stored name (<epoch ms>-<original name>)"""
    stored_name = f"{int(time.time() * 1000)}-{filename}"
    async with aiofiles.open(settings.RESUME_DIR / stored_name, "wb") as f:
        await f.write(content)
    return stored_name


def discard_resume(stored_name: Optional[str]) -> None:
    if stored_name:
        (settings.RESUME_DIR / stored_name).unlink(missing_ok=True)


async def _claim_listing_slot(db: AsyncSession, listing_id: str) -> InternshipListing:
    """Check the listing accepts applications and take one slot"""
    listing = await listing_crud.get(db, listing_id)
    if listing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Internship listing not found"
        )
    if not listing.is_active or listing.application_deadline < datetime.utcnow():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This internship is no longer accepting applications"
        )

    # Single conditional increment so concurrent applicants cannot overfill
    result = await db.execute(
        update(InternshipListing)
        .where(
            InternshipListing.id == listing_id,
            InternshipListing.current_applicants < InternshipListing.max_applicants,
        )
        .values(current_applicants=InternshipListing.current_applicants + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This internship has reached its maximum number of applicants"
        )
    return listing


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def submit_application(
    request: Request,
    name: str = Form(..., min_length=1),
    email: str = Form(..., min_length=3),
    phone: str = Form(..., min_length=1),
    role: str = Form(..., min_length=1),
    education: str = Form(...),
    experience: str = Form(...),
    skills: str = Form(...),
    internship_title: str = Form(..., alias="internshipTitle"),
    listing_id: Optional[str] = Form(None, alias="listingId"),
    cover_letter: Optional[str] = Form(None, alias="coverLetter"),
    resume: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db)
):
    """Submit an internship application (public)"""
    email = email.strip().lower()

    existing = await db.execute(
        select(InternshipApplication.id).where(
            InternshipApplication.email == email,
            InternshipApplication.internship_title == internship_title,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You have already applied for this internship"
        )

    upload = await read_resume(resume) if resume is not None and resume.filename else None

    # The listing may still turn the applicant away, so nothing is written before this
    if listing_id:
        await _claim_listing_slot(db, listing_id)

    resume_name = await store_resume(*upload) if upload else None

    try:
        application = InternshipApplication(
            name=name,
            email=email,
            phone=phone,
            role=role,
            education=education,
            experience=experience,
            skills=skills,
            resume=resume_name,
            cover_letter=cover_letter,
            listing_id=listing_id,
            internship_title=internship_title,
        )
        db.add(application)
        await db.flush()

        await email_service.send_template(
            db, "application_received", email,
            {
                "name": name,
                "email": email,
                "role": role,
                "date": application.date_applied.date().isoformat(),
            },
        )
        await db.commit()
    except Exception:
        discard_resume(resume_name)
        raise

    await db.refresh(application)

    logger.info(f"[Applications] New application from {email} for '{internship_title}'")
    return application


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="limit"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    query = select(InternshipApplication).order_by(InternshipApplication.date_applied.desc())
    if status_filter:
        query = query.where(InternshipApplication.status == status_filter)
    return await paginate(db, query, page=page, page_size=page_size)


@router.get("/stats/overview", response_model=ApplicationStats)
async def application_stats(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Counts by status plus applications from the last 7 days"""
    total = (await db.execute(select(func.count(InternshipApplication.id)))).scalar() or 0

    rows = await db.execute(
        select(InternshipApplication.status, func.count(InternshipApplication.id))
        .group_by(InternshipApplication.status)
    )
    by_status = {s.value: 0 for s in ApplicationStatus}
    for app_status, count in rows.all():
        by_status[app_status.value] = count

    week_ago = datetime.utcnow() - timedelta(days=7)
    recent = (await db.execute(
        select(func.count(InternshipApplication.id))
        .where(InternshipApplication.date_applied >= week_ago)
    )).scalar() or 0

    return ApplicationStats(total=total, by_status=by_status, recent=recent)


@router.get("/user/{user_id}", response_model=List[ApplicationResponse])
async def list_user_applications(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Applications submitted with a user's email (the user themselves or an admin)"""
    if current_user.role != UserRole.ADMIN and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )

    user = current_user if current_user.id == user_id else await db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return await application_crud.list(
        db,
        InternshipApplication.email == user.email.lower(),
        order_by=InternshipApplication.date_applied.desc(),
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    application = await application_crud.get_or_404(db, application_id)
    if current_user.role != UserRole.ADMIN and application.email != current_user.email.lower():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return application


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    update_data: ApplicationUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Review an application; approval and rejection notify the applicant"""
    application = await application_crud.get_or_404(db, application_id)
    previous_status = application.status

    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(application, field, value)

    if application.status != previous_status and application.status in (
        ApplicationStatus.APPROVED, ApplicationStatus.REJECTED
    ):
        template_key = (
            "application_approved"
            if application.status == ApplicationStatus.APPROVED
            else "application_rejected"
        )
        await email_service.send_template(
            db, template_key, application.email,
            {"name": application.name, "email": application.email, "role": application.role},
        )

    await db.commit()
    await db.refresh(application)

    logger.info(
        f"[Applications] {application.email}: {previous_status.value} -> {application.status.value}"
    )
    return application


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    application = await application_crud.get_or_404(db, application_id)

    if application.listing_id:
        await db.execute(
            update(InternshipListing)
            .where(
                InternshipListing.id == application.listing_id,
                InternshipListing.current_applicants > 0,
            )
            .values(current_applicants=InternshipListing.current_applicants - 1)
            .execution_options(synchronize_session=False)
        )

    resume_name = application.resume
    await application_crud.delete(db, application)
    discard_resume(resume_name)
