from sqlalchemy import Column, String, DateTime, Text, Float, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class BillStatus(str, enum.Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"
    OVERDUE = "Overdue"
    VERIFICATION_PENDING = "Verification Pending"


class Bill(Base):
    """Invoice raised against a client"""
    __tablename__ = "bills"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    client_id = Column(GUID, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    due_date = Column(DateTime, nullable=False)
    status = Column(SQLEnum(BillStatus), default=BillStatus.UNPAID, nullable=False)
    transaction_id = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    bill_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Bill {self.amount} ({self.status})>"
