from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum as SQLEnum, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ApplicationStatus(str, enum.Enum):
    NEW = "new"
    REVIEWING = "reviewing"
    APPROVED = "approved"
    REJECTED = "rejected"
    INTERVIEW = "interview"
    HIRED = "hired"


class InternshipApplication(Base):
    """Public application to an internship listing"""
    __tablename__ = "internship_applications"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Applicant
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    role = Column(String(255), nullable=False)
    education = Column(Text, nullable=False)
    experience = Column(Text, nullable=False)
    skills = Column(Text, nullable=False)
    resume = Column(String(500), nullable=True)  # stored filename
    cover_letter = Column(Text, nullable=True)

    listing_id = Column(GUID, ForeignKey("internship_listings.id", ondelete="SET NULL"), nullable=True)
    internship_title = Column(String(255), nullable=False)

    status = Column(SQLEnum(ApplicationStatus), default=ApplicationStatus.NEW, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    interview_date = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    date_applied = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_internship_applications_email_title", "email", "internship_title"),
    )

    def __repr__(self):
        return f"<InternshipApplication {self.email} -> {self.internship_title}>"
