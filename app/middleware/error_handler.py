"""
Centralized error handling middleware for FastAPI.

Provides consistent error responses and logging for all API routes.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for signing service errors."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class EmptyUploadError(ServiceError):
    """Raised when an uploaded file has no content."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Uploaded {field} is empty",
            status_code=400,
            details={"field": field},
        )


class UploadTooLargeError(ServiceError):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            message=f"File size exceeds {limit} byte limit",
            status_code=413,
            details={"size": size, "limit": limit},
        )


class UnsupportedMediaError(ServiceError):
    """Raised when an upload is not a media type that can carry credentials."""

    def __init__(self, filename: str | None, reason: str):
        super().__init__(
            message=f"Unsupported media: {reason}",
            status_code=415,
            details={"filename": filename, "reason": reason},
        )


class StorageError(ServiceError):
    """Raised when staging an upload on disk fails."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Failed to stage upload: {reason}",
            status_code=500,
            details={"path": path, "reason": reason},
        )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response

        except ServiceError as e:
            logger.error(
                f"ServiceError: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            return JSONResponse(
                status_code=e.status_code,
                content=format_error_response(e.status_code, e.message, e.details),
            )

        except Exception as e:
            # Log full stack trace for unexpected errors
            logger.exception(f"Unhandled exception: {str(e)}")
            return JSONResponse(
                status_code=500,
                content=format_error_response(
                    500,
                    "Internal server error",
                    str(e) if logger.isEnabledFor(logging.DEBUG) else None,
                ),
            )


def format_error_response(
    status_code: int,
    message: str,
    details: Any = None,
) -> dict:
    """
    Format a consistent error response.

    Args:
        status_code: HTTP status code
        message: Human-readable error message
        details: Additional error details (optional)

    Returns:
        dict: Formatted error response
    """
    response = {
        "error": True,
        "status_code": status_code,
        "message": message,
    }
    if details:
        response["details"] = details
    return response
