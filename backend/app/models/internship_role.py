from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer, JSON
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class InternshipRole(Base):
    """Role interns can be placed in, with its mentor and seat count"""
    __tablename__ = "internship_roles"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    duration = Column(String(100), nullable=True)
    requirements = Column(Text, nullable=True)
    skills = Column(JSON, default=list)
    mentor = Column(String(255), nullable=True)
    max_interns = Column(Integer, default=5)
    current_interns = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
