from sqlalchemy import Column, String, DateTime, Text, JSON, Enum as SQLEnum
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class ResourceType(str, enum.Enum):
    DOCUMENTATION = "documentation"
    TUTORIAL = "tutorial"
    VIDEO = "video"
    ARTICLE = "article"
    TOOL = "tool"


class ResourceCategory(str, enum.Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    DEVOPS = "devops"
    DESIGN = "design"
    GENERAL = "general"


class ResourceDifficulty(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Resource(Base):
    """Learning resource shared with members and interns"""
    __tablename__ = "resources"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(SQLEnum(ResourceType), default=ResourceType.DOCUMENTATION, nullable=False)
    url = Column(String(1000), nullable=False)
    category = Column(SQLEnum(ResourceCategory), default=ResourceCategory.GENERAL, nullable=False)
    difficulty = Column(SQLEnum(ResourceDifficulty), default=ResourceDifficulty.INTERMEDIATE, nullable=False)
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
