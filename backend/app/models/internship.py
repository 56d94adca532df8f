from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class InternshipState(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Internship(Base):
    """One intern's engagement, from start date to certificate"""
    __tablename__ = "internships"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    intern_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    application_id = Column(GUID, ForeignKey("internship_applications.id", ondelete="SET NULL"), nullable=True)

    internship_title = Column(String(255), nullable=False)
    status = Column(SQLEnum(InternshipState), default=InternshipState.IN_PROGRESS, nullable=False, index=True)
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    end_date = Column(DateTime, nullable=True)
    progress = Column(Integer, default=0)
    notes = Column(Text, nullable=True)
    completion_notice_sent_at = Column(DateTime, nullable=True)

    # Primary key of the issued Certificate (not its public NEX- id)
    certificate_ref = Column(GUID, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Internship {self.internship_title} ({self.status})>"
