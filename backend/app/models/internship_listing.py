from sqlalchemy import Column, String, Boolean, DateTime, Text, Integer, JSON, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ListingMode(str, enum.Enum):
    REMOTE = "remote"
    ONSITE = "onsite"
    HYBRID = "hybrid"


class ListingCategory(str, enum.Enum):
    WEB_DEVELOPMENT = "web-development"
    MOBILE_DEVELOPMENT = "mobile-development"
    DATA_SCIENCE = "data-science"
    UI_UX = "ui-ux"
    DIGITAL_MARKETING = "digital-marketing"
    CONTENT_WRITING = "content-writing"
    OTHER = "other"


class InternshipListing(Base):
    """Open internship position shown on the public careers page"""
    __tablename__ = "internship_listings"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    company = Column(String(255), default="NexByte", nullable=False)
    location = Column(String(255), nullable=False)
    mode = Column(SQLEnum(ListingMode), nullable=False)
    duration = Column(String(100), nullable=False)
    stipend = Column(String(100), default="Unpaid")

    skills = Column(JSON, default=list)
    requirements = Column(JSON, default=list)
    responsibilities = Column(JSON, default=list)

    category = Column(SQLEnum(ListingCategory), nullable=False)
    is_active = Column(Boolean, default=True, index=True)
    application_deadline = Column(DateTime, nullable=False)
    max_applicants = Column(Integer, default=50)
    current_applicants = Column(Integer, default=0)

    posted_by_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_full(self) -> bool:
        return (self.current_applicants or 0) >= (self.max_applicants or 0)

    def __repr__(self):
        return f"<InternshipListing {self.title}>"
