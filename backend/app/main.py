from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import get_session_local, init_db, close_db
from app.core.exceptions import NexByteError, error_response
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.api.v1.router import api_router
from slowapi.errors import RateLimitExceeded
from app.services.email_service import email_service
from app.services.internship_completion import internship_completion_service
import app.models  # Import models so metadata knows about them


async def validate_critical_config():
    """Validate configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
        errors.append("SECRET_KEY is not set or using default value")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if not settings.CERT_SECRET and not settings.CERT_ENC_KEY:
        if settings.is_production():
            errors.append("CERT_SECRET is not set - certificates cannot be encrypted")
        else:
            warnings.append("CERT_SECRET not set - using the development certificate key")

    if not settings.cloudinary_configured:
        warnings.append("Cloudinary not configured - certificates will link to the fallback page")

    if not settings.OPENAI_API_KEY:
        warnings.append("OPENAI_API_KEY not set - SRS generation disabled")

    if not settings.GEMINI_API_KEY:
        warnings.append("GEMINI_API_KEY not set - task and description generation disabled")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Configuration validated")


async def ensure_database_ready() -> bool:
    """Create missing tables and seed the default email templates"""
    try:
        await init_db()
        session_factory = get_session_local()
        async with session_factory() as session:
            await email_service.ensure_default_templates(session)
        logger.info("[Startup] Database ready")
        return True
    except Exception as e:
        logger.error(f"[Startup] Failed to prepare database: {e}")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    await validate_critical_config()

    if not await ensure_database_ready():
        logger.warning("[Startup] Database not ready - some features may fail")

    if settings.COMPLETION_CHECK_ENABLED:
        await internship_completion_service.start()
    else:
        logger.info("Internship completion sweep disabled")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")

    if settings.COMPLETION_CHECK_ENABLED:
        await internship_completion_service.stop()

    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="NexByte back office: clients, projects, internships, certificates and AI documents",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False  # Prevent 307 redirects that break CORS
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
# 1. Request logging (runs first for all requests)
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Request size limit (multipart bodies may carry a resume plus form fields)
app.add_middleware(
    RequestSizeLimitMiddleware,
    json_limit=1024 * 1024,
    upload_limit=(settings.MAX_RESUME_SIZE_MB + 1) * 1024 * 1024,
)

# 4. CORS - Origins from CORS_ORIGINS_STR in .env
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(NexByteError)
async def nexbyte_exception_handler(request: Request, exc: NexByteError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"[{exc.code}] {exc.message} - {request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health"
    }


# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
