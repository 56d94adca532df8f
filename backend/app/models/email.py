from sqlalchemy import Column, String, Boolean, DateTime, Text
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class EmailTemplate(Base):
    """
    Editable email template.

    Placeholders use `{name}` syntax and are filled from the context dict
    passed to EmailService.send_template.
    """
    __tablename__ = "email_templates"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    key = Column(String(100), unique=True, index=True, nullable=False)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    is_enabled = Column(Boolean, default=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class EmailLog(Base):
    """Record of every email the system attempted to send"""
    __tablename__ = "email_logs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    recipient = Column(String(255), nullable=False, index=True)
    subject = Column(String(500), nullable=False)
    template_key = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False)  # sent, failed, skipped
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
