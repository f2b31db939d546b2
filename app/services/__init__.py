"""Service layer for business logic and external integrations."""

from .file_storage import FileStorageManager
from .file_validator import validate_movie_upload, validate_photo_upload
from .signing_service import build_coordinator, get_coordinator, set_coordinator

__all__ = [
    "FileStorageManager",
    "validate_movie_upload",
    "validate_photo_upload",
    "build_coordinator",
    "get_coordinator",
    "set_coordinator",
]
