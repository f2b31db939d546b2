"""FastAPI middleware for request/response processing."""

from .error_handler import (
    ErrorHandlerMiddleware,
    ServiceError,
    EmptyUploadError,
    UploadTooLargeError,
    UnsupportedMediaError,
    StorageError,
    format_error_response,
)
from .file_size_validator import validate_file_size

__all__ = [
    "ErrorHandlerMiddleware",
    "ServiceError",
    "EmptyUploadError",
    "UploadTooLargeError",
    "UnsupportedMediaError",
    "StorageError",
    "format_error_response",
    "validate_file_size",
]
