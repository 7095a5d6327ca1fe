from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from framework.logging.logger import get_logger
from framework.response import ResponseModel
from typing import Dict, List, Optional
from framework.config import settings

logger = get_logger("exception_handler")

class BusinessException(Exception):
    """Base class for business exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        errors: Optional[List[str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors
        self.headers = headers


class ValidationException(BusinessException):
    """Malformed, missing or out-of-range input."""
    def __init__(self, message: str = "Validation error", errors: Optional[List[str]] = None):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, errors=errors)


class UnauthenticatedException(BusinessException):
    """Missing, invalid or expired credential, or deactivated account."""
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(BusinessException):
    """Authenticated, but role or ownership is insufficient."""
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class NotFoundException(BusinessException):
    """Resource absent, or owned by another workspace."""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class ConflictException(BusinessException):
    """Duplicate unique key (email, slug)."""
    def __init__(self, message: str, status_code: int = status.HTTP_409_CONFLICT):
        super().__init__(message, status_code=status_code)


def _format_validation_errors(errors: List[dict]) -> List[str]:
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    trace_id = getattr(request.state, "trace_id", "unknown")

    if isinstance(exc, BusinessException):
        logger.warning(f"Trace[{trace_id}] - BusinessError({exc.status_code}): {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(message=exc.message, errors=exc.errors),
            headers=exc.headers,
        )

    if isinstance(exc, RequestValidationError):
        errors = _format_validation_errors(exc.errors())
        logger.warning(f"Trace[{trace_id}] - ValidationError: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ResponseModel.fail(message="Validation error", errors=errors)
        )

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"Trace[{trace_id}] - DatabaseError: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResponseModel.fail(message="Service temporarily unavailable")
        )

    logger.opt(exception=True).error(f"Trace[{trace_id}] - UncaughtException: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ResponseModel.fail(
            message="Internal server error",
            data={"trace_id": trace_id} if settings.DEBUG else None
        )
    )
