"""
Intern self-service

Endpoints:
- PUT  /intern/profile        - Update own name, phone, bio and skills
- POST /intern/accept-offer   - Accept the offer letter
- POST /intern/reject-offer   - Decline the offer letter with an optional reason
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User, OfferStatus
from app.schemas.user import InternProfileUpdate, InternProfileResponse, OfferRejection, OfferResponse
from app.modules.auth.dependencies import require_permission

router = APIRouter(prefix="/intern", tags=["Intern"])


async def _answer_offer(db: AsyncSession, user: User, answer: OfferStatus, **values) -> None:
    """
    Record the intern's answer while the offer is still pending.

    The status check is part of the UPDATE so a double submit cannot flip
    an answer already given.
    """
    result = await db.execute(
        update(User)
        .where(User.id == user.id, User.offer_status == OfferStatus.PENDING)
        .values(offer_status=answer, updated_at=datetime.utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.rollback()
        await db.refresh(user)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Offer already {user.offer_status.value}"
        )
    await db.commit()
    await db.refresh(user)


@router.put("/profile", response_model=InternProfileResponse)
async def update_profile(
    profile_data: InternProfileUpdate,
    current_user: User = Depends(require_permission("profile", "update_own")),
    db: AsyncSession = Depends(get_db)
):
    """Only the fields sent are changed"""
    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)

    logger.info(f"[Intern] Profile updated for {current_user.email}")
    return current_user


@router.post("/accept-offer", response_model=OfferResponse)
async def accept_offer(
    current_user: User = Depends(require_permission("profile", "respond_offer")),
    db: AsyncSession = Depends(get_db)
):
    await _answer_offer(db, current_user, OfferStatus.ACCEPTED, offer_accepted_at=datetime.utcnow())

    logger.info(f"[Intern] {current_user.email} accepted their offer")
    return OfferResponse(message="Offer accepted successfully", offer_status=OfferStatus.ACCEPTED)


@router.post("/reject-offer", response_model=OfferResponse)
async def reject_offer(
    rejection: OfferRejection,
    current_user: User = Depends(require_permission("profile", "respond_offer")),
    db: AsyncSession = Depends(get_db)
):
    await _answer_offer(
        db, current_user, OfferStatus.REJECTED,
        offer_rejected_at=datetime.utcnow(),
        offer_rejection_reason=rejection.reason,
    )

    logger.info(f"[Intern] {current_user.email} rejected their offer")
    return OfferResponse(message="Offer rejected successfully", offer_status=OfferStatus.REJECTED)
