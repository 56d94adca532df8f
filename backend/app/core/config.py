from pydantic_settings import BaseSettings
from typing import List, Any, Optional
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_extensions(v: Any) -> List[str]:
    """Parse allowed extensions from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [ext.strip().lower() for ext in v.split(',') if ext.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "NexByte Core"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"
    API_PREFIX: str = "/api/v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # ==========================================
    # Certificates
    # ==========================================
    CERT_SECRET: str = ""  # Passphrase, hashed with SHA-256 into the AES key
    CERT_ENC_KEY: str = ""  # Raw 32-byte key (64 hex chars or base64), overrides CERT_SECRET
    CERT_COMPANY_NAME: str = "NexByte Core"
    CERT_RENDER_ENABLED: bool = True
    CERT_VIEWPORT_WIDTH: int = 1200
    CERT_VIEWPORT_HEIGHT: int = 850
    CLIENT_URL: str = "https://nexbyte-dev.vercel.app"
    PUBLIC_API_URL: str = "https://nexbyte-dev.vercel.app/api/v1"

    # ==========================================
    # Cloudinary
    # ==========================================
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "nexbyte/certificates"

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME and self.CLOUDINARY_API_KEY and self.CLOUDINARY_API_SECRET)

    # ==========================================
    # AI document generation
    # ==========================================
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    AI_TEMPERATURE: float = 0.7

    # ==========================================
    # Internship completion sweep
    # ==========================================
    COMPLETION_CHECK_ENABLED: bool = True
    COMPLETION_CHECK_INTERVAL_MINUTES: int = 60
    COMPLETION_NOTICE_DAYS: int = 7

    # ==========================================
    # Email
    # ==========================================
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = "nexbyte.dev@gmail.com"
    EMAIL_FROM_NAME: str = "NexByte"

    # ==========================================
    # Uploads
    # ==========================================
    UPLOAD_PATH: str = "uploads"
    MAX_RESUME_SIZE_MB: int = 5
    ALLOWED_RESUME_EXTENSIONS_STR: str = ".pdf,.doc,.docx"

    @property
    def ALLOWED_RESUME_EXTENSIONS(self) -> List[str]:
        return parse_extensions(self.ALLOWED_RESUME_EXTENSIONS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    REDIS_URL: str = ""  # Empty means in-memory limiter storage

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000,https://nexbyte-dev.vercel.app"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/nexbyte.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._base_dir = Path(__file__).resolve().parent.parent.parent
        self._upload_dir = Path(self.UPLOAD_PATH)
        if not self._upload_dir.is_absolute():
            self._upload_dir = self._base_dir / self._upload_dir
        self._resume_dir = self._upload_dir / "resumes"

    @property
    def BASE_DIR(self) -> Path:
        return self._base_dir

    @property
    def UPLOAD_DIR(self) -> Path:
        return self._upload_dir

    @property
    def RESUME_DIR(self) -> Path:
        self._resume_dir.mkdir(exist_ok=True, parents=True)
        return self._resume_dir

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def get_certificate_page_url(self, certificate_id: str) -> str:
        """Public certificate page used when no image was uploaded"""
        return f"{self.CLIENT_URL.rstrip('/')}/certificate/{certificate_id}"

    def get_verification_url(self, certificate_id: str) -> str:
        """Public verification endpoint for a certificate"""
        return f"{self.PUBLIC_API_URL.rstrip('/')}/certificates/verify/{certificate_id}"

    def get_cloudinary_public_id(self, certificate_id: str) -> Optional[str]:
        if not certificate_id:
            return None
        return f"{self.CLOUDINARY_FOLDER.strip('/')}/{certificate_id}"


# Create settings instance
settings = Settings()
