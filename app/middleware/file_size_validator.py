"""
File Size Validation

Validates uploaded file size without loading entire file into memory.
"""

import logging

from fastapi import UploadFile

from app.config import settings
from .error_handler import EmptyUploadError, UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


async def validate_file_size(file: UploadFile, field: str = "file") -> int:
    """
    Validate uploaded file size in chunks and rewind it for later reads.

    Args:
        file: FastAPI UploadFile object
        field: Form field name, used in error details

    Returns:
        int: Total file size in bytes

    Raises:
        UploadTooLargeError: 413 if file exceeds MAX_UPLOAD_SIZE
        EmptyUploadError: 400 if the file has no content
    """
    limit = settings.MAX_UPLOAD_SIZE
    size = 0

    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > limit:
            logger.warning(f"File size exceeded for {field}: {size} bytes (max: {limit})")
            raise UploadTooLargeError(size, limit)

    if size == 0:
        raise EmptyUploadError(field)

    await file.seek(0)

    logger.info(f"File size validation passed for {field}: {size} bytes")
    return size
