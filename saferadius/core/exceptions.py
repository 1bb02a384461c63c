"""
Global exception handling for the application.
Every error response body is {"error": {"code", "message", "details", "path"}}.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidArgumentException(AppError):
    """Malformed caller input, rejected before any work begins."""
    def __init__(self, message: str = "Invalid argument", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class DuplicateEmailException(AppError):
    """An account with this email already exists."""
    def __init__(self, message: str = "User already exists with this email", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class SelfDemotionException(ForbiddenException):
    """An actor tried to lower their own role."""
    def __init__(self, message: str = "You cannot demote your own account", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class GeocodingException(AppError):
    """The submitted address could not be turned into coordinates."""


class AddressNotFoundException(GeocodingException):
    def __init__(
        self,
        message: str = "Unable to geocode the provided address. Please check the address details.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class GeocoderUnavailableException(GeocodingException):
    def __init__(
        self,
        message: str = "Geocoding service is unavailable. Please try again later.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, details)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as the standard error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.__class__.__name__,
                "message": exc.message,
                "details": exc.details,
                "path": request.url.path,
            }
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return await app_error_handler(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )
