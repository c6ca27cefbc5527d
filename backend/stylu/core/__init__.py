"""
Core module for the Stylu backend.
Contains exception handling and bearer-token security.
"""
from .exceptions import (
    StyluException,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
    UpstreamError,
    ExternalServiceError,
    ServiceUnavailableError,
    ErrorResponse,
    stylu_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    rate_limit_exception_handler,
    generic_exception_handler,
    safe_execute,
)

__all__ = [
    "StyluException",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "RateLimitError",
    "UpstreamError",
    "ExternalServiceError",
    "ServiceUnavailableError",
    "ErrorResponse",
    "stylu_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "rate_limit_exception_handler",
    "generic_exception_handler",
    "safe_execute",
]
