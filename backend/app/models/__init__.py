# Re-export all models for convenient imports
from app.models.user import User, UserRole, InternshipStatus, InternType
from app.models.client import Client
from app.models.project import Project, ProjectStatus, ClientType
from app.models.task import Task, TaskStatus
from app.models.internship_listing import InternshipListing, ListingMode, ListingCategory
from app.models.internship_application import InternshipApplication, ApplicationStatus
from app.models.internship import Internship, InternshipState
from app.models.certificate import Certificate
from app.models.bill import Bill, BillStatus
from app.models.contact import Contact
from app.models.message import Message
from app.models.resource import Resource, ResourceType, ResourceCategory, ResourceDifficulty
from app.models.internship_role import InternshipRole
from app.models.email import EmailTemplate, EmailLog

__all__ = [
    # User
    "User",
    "UserRole",
    "InternshipStatus",
    "InternType",
    # Clients & projects
    "Client",
    "Project",
    "ProjectStatus",
    "ClientType",
    "Task",
    "TaskStatus",
    "Bill",
    "BillStatus",
    "Message",
    # Internships
    "InternshipListing",
    "ListingMode",
    "ListingCategory",
    "InternshipApplication",
    "ApplicationStatus",
    "Internship",
    "InternshipState",
    "InternshipRole",
    # Certificates
    "Certificate",
    # Misc
    "Contact",
    "Resource",
    "ResourceType",
    "ResourceCategory",
    "ResourceDifficulty",
    # Email
    "EmailTemplate",
    "EmailLog",
]
