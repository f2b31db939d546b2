"""Scratch files used as the write target while an asset is being signed."""

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO

from .exceptions import ScratchResourceUnavailableError

logger = logging.getLogger(__name__)


def resolve_scratch_dir(directory: Path | str | None) -> Path:
    """Return the scratch directory, creating it if needed.

    Raises:
        ScratchResourceUnavailableError: If no writable directory is available.
    """
    if not directory:
        raise ScratchResourceUnavailableError("No scratch directory configured")

    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ScratchResourceUnavailableError(f"Cannot create scratch directory {path}: {e}") from e

    if not os.access(path, os.W_OK | os.X_OK):
        raise ScratchResourceUnavailableError(f"Scratch directory {path} is not writable")
    return path


class ScratchArtifact:
    """A scratch destination owned by exactly one signing call.

    Use as a context manager: on exit the file is deleted if this call created
    it, unless it was adopted as the new backing file of a signed asset. A file
    that already existed (another call's destination) is never opened for
    writing and never deleted.
    """

    def __init__(self, directory: Path, title: str, unique: bool = False) -> None:
        name = title
        if unique:
            stem, dot, extension = title.rpartition(".")
            name = f"{stem}-{uuid.uuid4().hex[:8]}{dot}{extension}" if dot else f"{title}-{uuid.uuid4().hex[:8]}"
        self.path = Path(directory) / name
        self.created = False
        self.adopted = False

    def open(self) -> BinaryIO:
        """Create the file for exclusive read/write.

        Raises:
            FileExistsError: If another call already owns this destination.
        """
        handle = open(self.path, "x+b")
        self.created = True
        return handle

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def adopt(self) -> Path:
        """Hand the file over to the caller; it will not be deleted on exit."""
        self.adopted = True
        return self.path

    def release(self) -> None:
        if not self.created or self.adopted:
            return
        try:
            self.path.unlink(missing_ok=True)
            self.created = False
            logger.debug(f"Removed scratch file {self.path}")
        except OSError as e:
            logger.error(f"Failed to remove scratch file {self.path}: {e}")

    def __enter__(self) -> "ScratchArtifact":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False
