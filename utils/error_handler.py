"""
Error handling module for OohPay.
Provides typed domain errors, error logging and the API error handlers.
"""

from __future__ import annotations
import logging
from typing import Any, Optional
from datetime import datetime
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class OohPayError(Exception):
    """Base exception for all OohPay errors"""
    def __init__(self, message: str, details: Optional[dict] = None, user_message: Optional[str] = None):
        self.message = message
        self.details = details or {}
        self.user_message = user_message or message
        super().__init__(self.message)


class ValidationError(OohPayError):
    """Input validation errors"""
    pass


class InvalidPeriodError(ValidationError):
    """Shift bounds are missing, unparseable, or end is not after start"""
    pass


class InvalidRateError(ValidationError):
    """A payment rate is not a positive finite number"""
    pass


class InvalidTimezoneError(ValidationError):
    """A time zone identifier is not a known IANA zone"""
    pass


# Stable identifiers for API consumers
ERROR_TYPES = {
    InvalidPeriodError: "invalid_period",
    InvalidRateError: "invalid_rate",
    InvalidTimezoneError: "invalid_timezone",
    ValidationError: "validation_error",
}


def error_type_of(error: Exception) -> str:
    """Return the API error type for an exception (most specific class wins)."""
    for cls in type(error).__mro__:
        if cls in ERROR_TYPES:
            return ERROR_TYPES[cls]
    return "application_error" if isinstance(error, OohPayError) else "internal_error"


def log_error(error: Exception, context: Optional[dict] = None,
              with_traceback: bool = True) -> str:
    """
    Log an error with full context and return error ID.

    Args:
        error: The exception that occurred
        context: Additional context (operation, parameters)
        with_traceback: Attach the traceback to unexpected errors

    Returns:
        Error ID for tracking
    """
    error_id = f"{datetime.now().timestamp():.0f}"

    error_details = {
        'error_id': error_id,
        'error_type': type(error).__name__,
        'error_message': str(error),
        'timestamp': datetime.now().isoformat(),
        'context': context or {}
    }

    # Domain errors are caller mistakes - no traceback needed
    if isinstance(error, OohPayError):
        logger.warning(f"Application error {error_id}: {error_details}")
    else:
        logger.error(f"Unexpected error {error_id}: {error_details}",
                     exc_info=error if with_traceback else None)

    return error_id


async def handle_application_error(request: Request, exc: OohPayError) -> JSONResponse:
    """
    Handle application-specific errors with a precise, typed message.
    """
    error_id = log_error(exc, context={'path': request.url.path, 'method': request.method})

    return JSONResponse(
        status_code=400,
        content={
            'error': exc.user_message,
            'error_type': error_type_of(exc),
            'error_id': error_id,
            'details': _json_safe(exc.details)
        }
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors with generic message (no sensitive info).
    """
    # ServerErrorMiddleware re-raises after this handler and uvicorn logs the traceback
    error_id = log_error(exc, context={'path': request.url.path, 'method': request.method},
                         with_traceback=False)

    return JSONResponse(
        status_code=500,
        content={
            'error': 'An unexpected error occurred',
            'error_type': error_type_of(exc),
            'error_id': error_id
        }
    )


def _json_safe(details: dict) -> dict[str, Any]:
    return {key: value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
            for key, value in details.items()}
