"""
Health Check Endpoints

Endpoints:
- /health       - Simple liveness for load balancers
- /health/live  - Liveness (app is running)
- /health/ready - Readiness (database reachable and migrated)
- /health/deep  - Diagnostics for every dependency
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Dict, Any
import time

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.services.email_service import email_service
from app.services.internship_completion import internship_completion_service


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database(db: AsyncSession) -> Dict[str, Any]:
    """Check database connectivity and that the schema exists"""
    start = time.time()
    try:
        await db.execute(text("SELECT 1"))

        try:
            await db.execute(text("SELECT COUNT(*) FROM users"))
            tables_ok = True
        except Exception:
            await db.rollback()
            tables_ok = False

        latency = (time.time() - start) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(latency, 2),
            "tables_ready": tables_ok,
        }
    except Exception as e:
        latency = (time.time() - start) * 1000
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round(latency, 2),
            "tables_ready": False,
            "error": str(e),
        }


def check_email_config() -> Dict[str, Any]:
    if email_service.is_configured:
        return {"status": "healthy", "provider": "smtp", "host": settings.SMTP_HOST}
    return {"status": "degraded", "message": "SMTP not configured, emails are logged only"}


def check_certificates() -> Dict[str, Any]:
    """Certificate secret and image storage configuration"""
    warnings = []
    if not settings.CERT_ENC_KEY and not settings.CERT_SECRET:
        warnings.append("CERT_SECRET not set")
    if not settings.cloudinary_configured:
        warnings.append("Cloudinary not configured, certificates link to the fallback page")

    return {
        "status": "degraded" if warnings else "healthy",
        "render_enabled": settings.CERT_RENDER_ENABLED,
        "warnings": warnings,
    }


@router.get("")
async def health_check():
    """Simple health check for load balancers"""
    return {"status": "healthy", "service": "nexbyte-backend"}


@router.get("/live")
async def liveness_check():
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat(),
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
    }


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness probe.

    Returns 200 only if the database answers and the tables exist.
    """
    db_check = await check_database(db)
    is_ready = db_check.get("status") == "healthy" and db_check.get("tables_ready", False)

    response = {
        "status": "ready" if is_ready else "not_ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {"database": db_check},
    }

    if not is_ready:
        logger.warning(f"[HealthCheck] Readiness check failed: {response}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response
        )

    return response


@router.get("/deep")
async def deep_health_check(db: AsyncSession = Depends(get_db)):
    """Full diagnostics, including the completion sweep"""
    start_time = time.time()

    checks = {
        "database": await check_database(db),
        "email": check_email_config(),
        "certificates": check_certificates(),
        "completion_sweep": {
            "status": "healthy",
            "enabled": settings.COMPLETION_CHECK_ENABLED,
            **internship_completion_service.get_stats(),
        },
    }

    statuses = [c.get("status", "unknown") for c in checks.values()]
    if "unhealthy" in statuses:
        overall = "unhealthy"
    elif "degraded" in statuses:
        overall = "degraded"
    else:
        overall = "healthy"

    response = {
        "status": overall,
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.ENVIRONMENT,
        "total_check_time_ms": round((time.time() - start_time) * 1000, 2),
        "checks": checks,
    }

    if overall == "unhealthy":
        logger.error(f"[HealthCheck] Deep check unhealthy: {response}")

    return response
