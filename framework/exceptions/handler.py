from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from framework.logging.logger import get_logger
from framework.response import ResponseModel, ResponseState
from framework.exceptions.errors import (
    DuplicateKeyError,
    EntityNotFoundError,
    MissingKeyError,
    RepositoryError,
)
from typing import Any
from framework.config import settings

logger = get_logger("exception_handler")

class BusinessException(Exception):
    """Base class for business exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        state: ResponseState = ResponseState.BAD_REQUEST,
        detail: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.state = state
        self.detail = detail


def _fail(status_code: int, state: ResponseState, message: str, data: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResponseModel.fail(state=state, message=message, data=data),
    )


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    trace_id = getattr(request.state, "trace_id", "unknown")

    if isinstance(exc, BusinessException):
        logger.warning(f"Trace[{trace_id}] - BusinessError: {exc.message}")
        return _fail(exc.status_code, exc.state, exc.message, exc.detail)

    if isinstance(exc, RequestValidationError):
        logger.error(f"Trace[{trace_id}] - ValidationError: {exc.errors()}")
        return _fail(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ResponseState.VALIDATION_ERROR,
            "Invalid request parameters",
            jsonable_encoder(exc.errors()),
        )

    if isinstance(exc, EntityNotFoundError):
        logger.warning(f"Trace[{trace_id}] - NotFound: {str(exc)}")
        return _fail(status.HTTP_404_NOT_FOUND, ResponseState.NOT_FOUND, str(exc))

    if isinstance(exc, DuplicateKeyError):
        logger.warning(f"Trace[{trace_id}] - Conflict: {str(exc)}")
        return _fail(status.HTTP_409_CONFLICT, ResponseState.CONFLICT, str(exc))

    if isinstance(exc, MissingKeyError):
        logger.error(f"Trace[{trace_id}] - MissingKey: {str(exc)}")
        return _fail(status.HTTP_400_BAD_REQUEST, ResponseState.BAD_REQUEST, str(exc))

    if isinstance(exc, RepositoryError):
        logger.error(f"Trace[{trace_id}] - RepositoryError: {str(exc)}")
        return _fail(status.HTTP_500_INTERNAL_SERVER_ERROR, ResponseState.ERROR, "Data access error")

    if isinstance(exc, IntegrityError):
        logger.warning(f"Trace[{trace_id}] - IntegrityError: {str(exc.orig) if exc.orig else str(exc)}")
        return _fail(status.HTTP_409_CONFLICT, ResponseState.CONFLICT, "Data conflict")

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"Trace[{trace_id}] - DatabaseError: {str(exc)}")
        return _fail(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ResponseState.ERROR,
            "Service temporarily unavailable",
        )

    logger.opt(exception=True).error(f"Trace[{trace_id}] - UncaughtException: {str(exc)}")

    return _fail(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ResponseState.ERROR,
        "System busy, please try again later",
        {"trace_id": trace_id} if settings.DEBUG else None,
    )


HANDLED_EXCEPTIONS = (
    BusinessException,
    RequestValidationError,
    RepositoryError,
    SQLAlchemyError,
    Exception,
)
