"""
Email administration: templates, delivery log and test sends
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User
from app.models.email import EmailTemplate, EmailLog
from app.schemas.email import (
    EmailTemplateUpdate,
    EmailTemplateResponse,
    EmailLogResponse,
    TestEmailRequest,
)
from app.modules.auth.dependencies import get_current_admin
from app.services.email_service import email_service, DEFAULT_TEMPLATES

router = APIRouter(prefix="/email", tags=["Email"])


@router.get("/templates", response_model=List[EmailTemplateResponse])
async def list_templates(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await email_service.ensure_default_templates(db)
    result = await db.execute(select(EmailTemplate).order_by(EmailTemplate.key))
    return result.scalars().all()


@router.put("/templates/{key}", response_model=EmailTemplateResponse)
async def update_template(
    key: str,
    template_data: EmailTemplateUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    if key not in DEFAULT_TEMPLATES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email template not found"
        )

    await email_service.ensure_default_templates(db)
    template = await email_service.get_template(db, key)

    for field, value in template_data.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    await db.commit()
    await db.refresh(template)

    logger.info(f"[Email] {admin.email} updated template '{key}'")
    return template


@router.get("/logs", response_model=List[EmailLogResponse])
async def list_logs(
    limit: int = Query(100, ge=1, le=500),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(
        select(EmailLog).order_by(EmailLog.sent_at.desc()).limit(limit)
    )
    return result.scalars().all()


@router.post("/test", response_model=EmailLogResponse)
async def send_test_email(
    email_data: TestEmailRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Send a template to an address with sample values"""
    if email_data.template_key not in DEFAULT_TEMPLATES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email template not found"
        )

    sample = {
        "name": "Test User",
        "email": email_data.email,
        "role": "Web Development Intern",
        "date": "2024-01-01",
        "internship_title": "Web Development",
        "end_date": "2024-03-31",
        "days_left": 7,
        "certificate_id": "NEX-TEST-000000",
        "certificate_url": "https://example.com/certificate/NEX-TEST-000000",
    }
    log_entry = await email_service.send_template(db, email_data.template_key, email_data.email, sample)
    await db.commit()
    await db.refresh(log_entry)
    return log_entry
