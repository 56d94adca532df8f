from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.bill import BillStatus


class BillCreate(BaseModel):
    client_id: str
    amount: float = Field(..., gt=0)
    due_date: datetime
    description: Optional[str] = None
    status: BillStatus = BillStatus.UNPAID


class BillUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    description: Optional[str] = None
    status: Optional[BillStatus] = None
    transaction_id: Optional[str] = None


class BillPayment(BaseModel):
    transaction_id: str = Field(..., min_length=1, max_length=255)


class BillResponse(BaseModel):
    id: str
    client_id: str
    amount: float
    due_date: datetime
    status: BillStatus
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    bill_date: datetime

    class Config:
        from_attributes = True
