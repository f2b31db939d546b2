"""
File Storage Manager Service

Stages uploaded movies on disk so the signing pipeline can stream them from
a file, and removes staged or signed files once a response has been sent.
"""

import logging
from pathlib import Path

from fastapi import UploadFile

from app.middleware.error_handler import StorageError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FileStorageManager:
    """
    Manages staging storage for uploaded media.

    Handles:
    - Saving uploaded files to the staging directory
    - Removing staged and signed files after a request completes
    """

    def __init__(self, base_path: str | Path):
        """
        Initialize FileStorageManager with base storage path.

        Args:
            base_path: Staging directory for uploads
        """
        self.base_path = Path(base_path)

    async def save_upload(self, upload_id: str, file: UploadFile, suffix: str) -> Path:
        """
        Save uploaded file to the staging directory.

        Creates: {base_path}/{upload_id}{suffix}
        Sets file permissions to 600 (owner read/write only)

        Args:
            upload_id: Unique identifier for this upload (UUID v4)
            file: FastAPI UploadFile object containing the media
            suffix: Filename extension including the dot, e.g. ".mov"

        Returns:
            Path: Full path to the staged file

        Raises:
            StorageError: If directory creation or file write fails
        """
        file_path = self.base_path / f"{upload_id}{suffix.lower()}"

        created = False
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)

            with open(file_path, "xb") as f:
                created = True
                while chunk := await file.read(CHUNK_SIZE):
                    f.write(chunk)

            file_path.chmod(0o600)

            logger.info(f"Staged upload {upload_id} at {file_path}")
            return file_path

        except OSError as e:
            logger.error(f"Failed to stage upload {upload_id}: {str(e)}")
            if created:
                file_path.unlink(missing_ok=True)
            raise StorageError(str(file_path), str(e)) from e

    def remove(self, *paths: Path | None) -> None:
        """
        Remove staged or signed files, ignoring ones that are already gone.

        Args:
            paths: Files to delete; None entries are skipped
        """
        for path in paths:
            if path is None:
                continue
            try:
                Path(path).unlink(missing_ok=True)
                logger.debug(f"Removed {path}")
            except OSError as e:
                logger.error(f"Failed to remove {path}: {str(e)}")
