from app.services.storage_service import StorageService, storage_service
from app.services.email_service import EmailService, email_service
from app.services.crud_service import CRUDService

# Certificate pipeline
from app.services.certificate_service import CertificateService, certificate_service
from app.services.internship_completion import InternshipCompletionService, internship_completion_service

# AI documents
from app.services.ai_document_service import AIDocumentService, ai_document_service

__all__ = [
    # Core services
    "StorageService",
    "storage_service",
    "EmailService",
    "email_service",
    "CRUDService",
    # Certificates
    "CertificateService",
    "certificate_service",
    "InternshipCompletionService",
    "internship_completion_service",
    # AI
    "AIDocumentService",
    "ai_document_service",
]
