"""
NexByte - HTTP middleware

Request ids and access logging, security headers, body size limits.
"""

import time
from typing import Callable, Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from starlette.types import ASGIApp

from app.core.config import settings
from app.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


# Probes and docs are polled constantly; keep them out of the access log
QUIET_PATHS: Set[str] = {
    "/",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
    f"{settings.API_PREFIX}/health",
    f"{settings.API_PREFIX}/health/ready",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (taken from X-Request-ID when the proxy
    sent one) and writes one access log line per request.
    """

    def __init__(self, app: ASGIApp, slow_request_ms: float = 2000):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        path = request.url.path
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.error(f"{request.method} {path} raised", exc_info=True)
            raise
        finally:
            duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if path not in QUIET_PATHS:
            logger.log_request(request.method, path, response.status_code, duration_ms)
            # Certificate rendering is the usual culprit
            if duration_ms > self.slow_request_ms:
                logger.warning(f"Slow request: {request.method} {path} took {duration_ms:.0f}ms")

        set_request_id("")
        set_user_id("")
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects bodies over the limit from Content-Length alone.

    Multipart requests (resume uploads) get `upload_limit`, everything else
    `json_limit`. The upload handler still checks the file itself.
    """

    def __init__(self, app: ASGIApp, json_limit: int = 1024 * 1024, upload_limit: int = 10 * 1024 * 1024):
        super().__init__(app)
        self.json_limit = json_limit
        self.upload_limit = upload_limit

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if not content_length or not content_length.isdigit():
            return await call_next(request)

        is_upload = request.headers.get("content-type", "").startswith("multipart/form-data")
        limit = self.upload_limit if is_upload else self.json_limit

        if int(content_length) > limit:
            logger.warning(
                f"Rejected {content_length} byte body on {request.url.path} (limit {limit})"
            )
            return JSONResponse(
                status_code=413,
                content={"detail": f"Request body too large. Maximum size is {limit // 1024} KB"}
            )

        return await call_next(request)


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "RequestSizeLimitMiddleware",
    "QUIET_PATHS",
]
