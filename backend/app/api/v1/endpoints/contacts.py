"""
Contact form
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import limiter
from app.models.user import User
from app.models.contact import Contact
from app.schemas.contact import ContactCreate, ContactResponse
from app.modules.auth.dependencies import get_current_admin
from app.services.crud_service import contact_crud

router = APIRouter(prefix="/contacts", tags=["Contacts"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def submit_contact(
    request: Request,
    contact_data: ContactCreate,
    db: AsyncSession = Depends(get_db)
):
    """Public contact form submission"""
    contact = await contact_crud.create(db, contact_data.model_dump())
    logger.info(f"[Contacts] New message from {contact.email}")
    return contact


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await contact_crud.list(db, order_by=Contact.created_at.desc())
