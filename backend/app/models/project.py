from sqlalchemy import Column, String, DateTime, Text, Float, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ProjectStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class ClientType(str, enum.Enum):
    CLIENT = "client"
    NON_CLIENT = "non-client"


class Project(Base):
    """Internal or client project tracked by the back office"""
    __tablename__ = "projects"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_name = Column(String(255), nullable=False)
    project_type = Column(String(100), nullable=False)
    project_description = Column(Text, nullable=False)
    total_budget = Column(Float, nullable=False)
    project_deadline = Column(DateTime, nullable=False)

    client_type = Column(SQLEnum(ClientType), default=ClientType.NON_CLIENT, nullable=False)
    associated_client_id = Column(GUID, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    assigned_to_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    status = Column(SQLEnum(ProjectStatus), default=ProjectStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Project {self.project_name} ({self.status})>"
