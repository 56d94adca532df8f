from sqlalchemy import Column, DateTime, Text, ForeignKey
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Message(Base):
    """Message from a client to the NexByte team"""
    __tablename__ = "messages"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    client_id = Column(GUID, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
