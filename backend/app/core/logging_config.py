"""
NexByte - Logging

Plain text on the console in development, one JSON object per line in
production. Every record carries the request id and the authenticated user
of the request it was written from.
"""

import logging
import sys
import json
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from app.core.config import settings


request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'request_id', 'user_id'}


class JSONFormatter(logging.Formatter):
    """One JSON document per record, `extra=` fields merged at the top level"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
            "request_id": get_request_id() or None,
            "user_id": get_user_id() or None,
        }

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update({
            key: value for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith('_')
        })

        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Text formatter with request/user columns"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class NexByteLogger(logging.Logger):
    """Logger with helpers for the events operators search for"""

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} -> {status_code} ({duration_ms:.1f}ms)",
            extra={
                "event_type": "http",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        message = f"Auth {event}: {'ok' if success else 'failed'}"
        if user_email:
            message += f" - {user_email}"
        if reason:
            message += f" ({reason})"
        self.log(
            logging.INFO if success else logging.WARNING,
            message,
            extra={"event_type": "auth", "auth_event": event, "auth_success": success, **kwargs}
        )

    def log_certificate_event(self, certificate_id: str, event: str,
                              success: bool = True, **kwargs) -> None:
        """One step of the certificate pipeline (render, upload, encrypt, verify)"""
        self.log(
            logging.INFO if success else logging.WARNING,
            f"Certificate {certificate_id}: {event}",
            extra={
                "event_type": "certificate",
                "certificate_id": certificate_id,
                "certificate_success": success,
                **kwargs
            }
        )

    def log_completion_sweep(self, completed: int, nearing: int, duration_ms: float) -> None:
        self.info(
            f"[Completion] Sweep finished - completed={completed} nearing={nearing} ({duration_ms:.0f}ms)",
            extra={
                "event_type": "completion_sweep",
                "completed": completed,
                "nearing_completion": nearing,
                "duration_ms": round(duration_ms, 2),
            }
        )


def _file_handler(formatter: logging.Formatter, backups: int) -> Optional[logging.Handler]:
    if not settings.LOG_FILE:
        return None
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=backups)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> NexByteLogger:
    logging.setLoggerClass(NexByteLogger)

    logger = logging.getLogger("nexbyte")
    logger.__class__ = NexByteLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    json_logging = settings.is_production()
    if json_logging:
        console_formatter = file_formatter = JSONFormatter()
        backups = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | [%(request_id)s] %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
            "%(module)s.%(funcName)s:%(lineno)d | %(message)s"
        )
        backups = 5

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    file_handler = _file_handler(file_formatter, backups)
    if file_handler:
        logger.addHandler(file_handler)

    # Third-party chatter
    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "aiosmtplib"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": json_logging}
    )
    return logger


logger: NexByteLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'NexByteLogger',
]
