from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, Integer, JSON, Text
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "admin"
    MEMBER = "member"
    CLIENT = "client"
    INTERN = "intern"
    USER = "user"


class InternshipStatus(str, enum.Enum):
    """Where an intern is in their internship"""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class InternType(str, enum.Enum):
    FREE = "free"
    STIPEND = "stipend"


class OfferStatus(str, enum.Enum):
    """Intern's answer to their offer letter"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    name = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, default=list)

    role = Column(SQLEnum(UserRole), default=UserRole.MEMBER, nullable=False)
    is_active = Column(Boolean, default=True)
    credits = Column(Integer, default=0)

    # Internship tracking
    internship_status = Column(
        SQLEnum(InternshipStatus), default=InternshipStatus.NOT_STARTED, nullable=False
    )
    current_internship_id = Column(GUID, nullable=True)
    intern_type = Column(SQLEnum(InternType), default=InternType.FREE, nullable=True)

    # Offer letter
    offer_status = Column(SQLEnum(OfferStatus), default=OfferStatus.PENDING, nullable=False)
    offer_accepted_at = Column(DateTime, nullable=True)
    offer_rejected_at = Column(DateTime, nullable=True)
    offer_rejection_reason = Column(Text, nullable=True)

    # Client-role users point at their Client record
    client_id = Column(GUID, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        if full_name:
            return full_name
        return self.email.split("@")[0]

    def __repr__(self):
        return f"<User {self.email}>"
