"""
Internship listings shown on the public careers page
"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User
from app.models.internship_listing import InternshipListing, ListingCategory, ListingMode
from app.schemas.listing import ListingCreate, ListingUpdate, ListingResponse
from app.modules.auth.dependencies import get_current_admin
from app.services.crud_service import listing_crud

router = APIRouter(prefix="/internship-listings", tags=["Internship Listings"])


@router.get("", response_model=List[ListingResponse])
async def list_active_listings(
    category: Optional[ListingCategory] = Query(None),
    mode: Optional[ListingMode] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Active listings, newest first (public)"""
    filters = [InternshipListing.is_active.is_(True)]
    if category:
        filters.append(InternshipListing.category == category)
    if mode:
        filters.append(InternshipListing.mode == mode)
    return await listing_crud.list(db, *filters, order_by=InternshipListing.created_at.desc())


@router.get("/all", response_model=List[ListingResponse])
async def list_all_listings(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await listing_crud.list(db, order_by=InternshipListing.created_at.desc())


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: str,
    db: AsyncSession = Depends(get_db)
):
    return await listing_crud.get_or_404(db, listing_id)


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing(
    listing_data: ListingCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    values = listing_data.model_dump()
    values["posted_by_id"] = admin.id
    listing = await listing_crud.create(db, values)
    logger.info(f"[Listings] {admin.email} posted '{listing.title}'")
    return listing


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    listing_data: ListingUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    listing = await listing_crud.get_or_404(db, listing_id)
    return await listing_crud.update(db, listing, listing_data.model_dump(exclude_unset=True))


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    listing = await listing_crud.get_or_404(db, listing_id)
    await listing_crud.delete(db, listing)
    logger.info(f"[Listings] {admin.email} deleted listing {listing_id}")
