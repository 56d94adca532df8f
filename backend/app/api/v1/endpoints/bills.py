"""
Bills

Admins raise and manage bills; clients see their own and submit payments
for verification.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User
from app.models.bill import Bill, BillStatus
from app.schemas.bill import BillCreate, BillUpdate, BillPayment, BillResponse
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.crud_service import bill_crud, client_crud

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.get("", response_model=List[BillResponse])
async def list_bills(
    client_id: Optional[str] = Query(None),
    status_filter: Optional[BillStatus] = Query(None, alias="status"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    filters = []
    if client_id:
        filters.append(Bill.client_id == client_id)
    if status_filter:
        filters.append(Bill.status == status_filter)
    return await bill_crud.list(db, *filters, order_by=Bill.bill_date.desc())


@router.get("/mine", response_model=List[BillResponse])
async def list_my_bills(
    current_user: User = Depends(require_permission("bills", "list_own")),
    db: AsyncSession = Depends(get_db)
):
    if not current_user.client_id:
        return []
    return await bill_crud.list(
        db, Bill.client_id == current_user.client_id, order_by=Bill.bill_date.desc()
    )


@router.post("", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_data: BillCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await client_crud.get_or_404(db, bill_data.client_id)
    bill = await bill_crud.create(db, bill_data.model_dump())
    logger.info(f"[Bills] Bill {bill.id} raised for client {bill.client_id}: {bill.amount}")
    return bill


@router.put("/{bill_id}", response_model=BillResponse)
async def update_bill(
    bill_id: str,
    bill_data: BillUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    bill = await bill_crud.get_or_404(db, bill_id)
    return await bill_crud.update(db, bill, bill_data.model_dump(exclude_unset=True))


@router.put("/{bill_id}/pay", response_model=BillResponse)
async def pay_bill(
    bill_id: str,
    payment: BillPayment,
    current_user: User = Depends(require_permission("bills", "pay")),
    db: AsyncSession = Depends(get_db)
):
    """Record a client payment; an admin then verifies it"""
    bill = await bill_crud.get_or_404(db, bill_id)
    if bill.client_id != current_user.client_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    if bill.status == BillStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bill is already paid"
        )

    bill = await bill_crud.update(db, bill, {
        "transaction_id": payment.transaction_id,
        "status": BillStatus.VERIFICATION_PENDING,
    })
    logger.info(f"[Bills] Payment submitted for bill {bill.id} (txn {payment.transaction_id})")
    return bill
