import sys
from pathlib import Path
from contextvars import ContextVar
from typing import Optional
from loguru import logger
from fastapi import Request
from framework.config import settings

# Store current request in contextvars for async context
_current_request: ContextVar[Optional[Request]] = ContextVar("current_request", default=None)

# Ensure log directory exists
LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | "
    "Trace:{extra[trace_id]} | Actor:{extra[actor]} - {message}"
)

class LogConfig:
    """Global logging configuration using Loguru."""
    @classmethod
    def setup_logging(cls):
        logger.remove()
        logger.configure(extra={"trace_id": "system", "actor": "-"})

        logger.add(
            sys.stdout,
            enqueue=True,
            backtrace=True,
            diagnose=settings.DEBUG,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<magenta>Trace:{extra[trace_id]}</magenta> - <level>{message}</level>"
            ),
            level=settings.LOG_LEVEL.upper(),
        )

        # Daily application log, all levels
        logger.add(
            LOG_DIR / f"{settings.LOG_FILE_PREFIX}_{{time:YYYY-MM-DD}}.log",
            rotation="00:00",
            retention=f"{settings.LOG_RETENTION_DAYS} days",
            compression="zip",
            enqueue=True,
            format=FILE_FORMAT,
            level="DEBUG",
        )

        # Errors only, kept apart for alerting
        logger.add(
            LOG_DIR / f"{settings.LOG_FILE_PREFIX}_error_{{time:YYYY-MM-DD}}.log",
            level="ERROR",
            rotation="100 MB",
            retention=f"{settings.LOG_RETENTION_DAYS} days",
            enqueue=True,
            backtrace=True,
            diagnose=settings.DEBUG,
            format=FILE_FORMAT,
        )

def get_current_request() -> Optional[Request]:
    """Request being served by this task, if any."""
    return _current_request.get()

def get_logger(name: str = None, request: Optional[Request] = None):
    """
    Get logger bound to the request's trace id and acting user.

    Falls back to the request published by LoggingMiddleware; outside a
    request the values set by LogConfig or logger.contextualize apply.
    """
    current_request = request or _current_request.get()

    extra = {}
    if current_request is not None:
        extra["trace_id"] = getattr(current_request.state, "trace_id", "unknown")
        extra["actor"] = getattr(current_request.state, "user_id", None) or "anonymous"
    if name:
        extra["name"] = name
    return logger.bind(**extra)
