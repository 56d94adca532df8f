from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Contact(Base):
    """Contact form submission"""
    __tablename__ = "contacts"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    mobile = Column(String(10), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
