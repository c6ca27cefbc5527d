"""
Centralized exception handling for the Stylu backend.

Every error leaves the API in one shape:
``{"success": false, "error_code": ..., "message": ..., "details": ...}``.
"""
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exception Classes
# =============================================================================

class StyluException(Exception):
    """Base exception for Stylu application errors.

    Subclasses set ``status_code`` and ``error_code`` at class level and only
    build the message and details.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(StyluException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any = None):
        if resource_id is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message, details={"resource": resource, "id": resource_id})


class ValidationError(StyluException):
    """Request is well-formed but its values are not acceptable."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)


class AuthenticationError(StyluException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(StyluException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message)


class RateLimitError(StyluException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMIT_ERROR"

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class UpstreamError(StyluException):
    """The Supabase data API answered with a non-success status.

    The downstream status code is reused as-is and the response body is passed
    through untouched so the app sees exactly what PostgREST reported.
    """
    error_code = "UPSTREAM_ERROR"

    def __init__(self, status_code: int, body: str, message: str = "Data API request failed"):
        self.upstream_status = status_code
        self.body = body
        super().__init__(
            message,
            status_code=status_code,
            details={"upstream_status": status_code, "body": body}
        )


class ExternalServiceError(StyluException):
    """Supabase or Firebase could not be reached, or failed outright."""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} service error: {message}", details={"service": service})


class ServiceUnavailableError(StyluException):
    """A required integration is not configured on this deployment."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "SERVICE_UNAVAILABLE"

    def __init__(self, service: str):
        super().__init__(f"{service} is not configured", details={"service": service})


# =============================================================================
# Error Response Model
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response format."""
    success: bool = False
    error_code: str
    message: str
    details: Optional[Any] = None


HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(error_code=error_code, message=message, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


# =============================================================================
# Exception Handlers for FastAPI
# =============================================================================

async def stylu_exception_handler(request: Request, exc: StyluException) -> JSONResponse:
    """Handle Stylu custom exceptions."""
    if exc.status_code >= 500:
        logger.error(f"StyluException: {exc.error_code} - {exc.message}", extra={"details": exc.details})
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}")
    return _error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised HTTP errors (unknown route, wrong method) in the standard shape."""
    if exc.status_code >= 500:
        error_code = "SERVER_ERROR"
    else:
        error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return _error_response(exc.status_code, error_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies as 400 without echoing parser internals."""
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    logger.info(f"Rejected request body for {request.method} {request.url.path}: fields={fields}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Invalid request data",
        {"fields": fields} if fields else None,
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi's limit breach in the standard error format."""
    return await stylu_exception_handler(request, RateLimitError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything unhandled; exception text only leaks in development."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method}
    )

    from stylu.config import settings
    if settings.is_development:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            str(exc),
            {"traceback": traceback.format_exc()},
        )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "An unexpected error occurred")


# =============================================================================
# Utility Functions
# =============================================================================

def safe_execute(func, *args, default=None, log_error: bool = True, **kwargs):
    """
    Run a best-effort side effect; on failure log it and return ``default``.
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        if log_error:
            logger.warning(f"safe_execute caught error in {func.__name__}: {e}")
        return default
