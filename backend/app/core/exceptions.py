"""
Custom Exceptions for NexByte
=============================

Use these instead of generic Exception so the API layer can map
failures to status codes and error codes.

Usage:
    from app.core.exceptions import InternshipNotFoundError, CertificateDecryptionError

    if not internship:
        raise InternshipNotFoundError(internship_id)

    try:
        data = decrypt_certificate_data(blob)
    except CertificateDecryptionError as e:
        logger.error(f"Decryption failed: {e}")
        raise
"""

from typing import Optional, Any, Dict


class NexByteError(Exception):
    """Base exception for all NexByte errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(NexByteError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class InternshipNotFoundError(ResourceNotFoundError):
    def __init__(self, internship_id: str):
        super().__init__("Internship", internship_id)


class CertificateNotFoundError(ResourceNotFoundError):
    def __init__(self, certificate_id: str):
        super().__init__("Certificate", certificate_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(NexByteError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__(
            f"Invalid file type '{file_type}'. Allowed: {', '.join(allowed_types)}"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"file_type": file_type, "allowed_types": allowed_types}


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the size limit"""

    def __init__(self, max_size_mb: int):
        super().__init__(f"File too large. Maximum size is {max_size_mb}MB")
        self.code = "FILE_TOO_LARGE"
        self.details = {"max_size_mb": max_size_mb}


# ============================================
# AI Errors
# ============================================

class AIServiceError(NexByteError):
    """Upstream LLM provider failed"""

    status_code = 502

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message, code="AI_SERVICE_ERROR")
        if provider:
            self.details["provider"] = provider


class AIConfigurationError(AIServiceError):
    """LLM provider has no API key configured"""

    status_code = 503

    def __init__(self, provider: str):
        super().__init__(f"{provider} API key is not configured", provider=provider)
        self.code = "AI_NOT_CONFIGURED"


# ============================================
# Storage Errors
# ============================================

class StorageError(NexByteError):
    """Storage operation failed"""

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")


class CertificateUploadError(StorageError):
    """Certificate image upload failed"""

    def __init__(self, key: str, message: str = "Upload failed"):
        super().__init__(f"Failed to upload certificate image: {message}")
        self.code = "CERTIFICATE_UPLOAD_FAILED"
        self.details["public_id"] = key


# ============================================
# Certificate Pipeline Errors
# ============================================

class CertificateError(NexByteError):
    """Certificate pipeline failed"""

    def __init__(self, message: str, certificate_id: Optional[str] = None):
        super().__init__(message, code="CERTIFICATE_ERROR")
        if certificate_id:
            self.details["certificate_id"] = certificate_id


class CertificateRenderError(CertificateError):
    """HTML rendering or screenshot failed"""

    def __init__(self, message: str = "Certificate rendering failed", certificate_id: Optional[str] = None):
        super().__init__(message, certificate_id)
        self.code = "CERTIFICATE_RENDER_FAILED"


class CertificateEncryptionError(CertificateError):
    """Payload encryption failed"""

    def __init__(self, message: str = "Encryption failed"):
        super().__init__(message)
        self.code = "CERTIFICATE_ENCRYPTION_FAILED"


class CertificateDecryptionError(CertificateError):
    """Neither ciphertext format could be decrypted"""

    def __init__(self, message: str = "Decryption failed"):
        super().__init__(message)
        self.code = "CERTIFICATE_DECRYPTION_FAILED"


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: NexByteError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
