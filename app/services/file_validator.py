"""
File Validation Service

Checks that uploaded media is a type the signing pipeline can carry
credentials in, before any signing work is done.
"""

import logging
from pathlib import PurePath

from credential_engine import AssetMetadataResolver, ContentType

from app.middleware.error_handler import UnsupportedMediaError

logger = logging.getLogger(__name__)


def validate_photo_upload(
    data: bytes,
    filename: str | None,
    resolver: AssetMetadataResolver,
) -> ContentType:
    """
    Validate an uploaded photo by sniffing its container header.

    The filename is only used for error details; the type is never
    taken from the extension.

    Args:
        data: Uploaded image bytes
        filename: Client supplied filename
        resolver: Metadata resolver used by the signing pipeline

    Returns:
        ContentType: Detected image type

    Raises:
        UnsupportedMediaError: 415 if the container is not a registered image type
    """
    content_type = resolver.sniff_photo_type(data)

    if content_type is None or not content_type.mime.startswith("image/"):
        logger.warning(f"Unrecognised photo container: {filename}")
        raise UnsupportedMediaError(filename, "photo container not recognised")

    logger.info(f"Photo validation passed for {filename}: {content_type.mime}")
    return content_type


def validate_movie_upload(
    filename: str | None,
    resolver: AssetMetadataResolver,
) -> ContentType:
    """
    Validate an uploaded movie by its filename extension.

    Movies are identified by the registered type of their extension, the same
    way the signing pipeline identifies movies on disk.

    Args:
        filename: Client supplied filename, e.g. "clip.mov"
        resolver: Metadata resolver used by the signing pipeline

    Returns:
        ContentType: Registered movie type

    Raises:
        UnsupportedMediaError: 415 if the extension is missing or not a video type
    """
    suffix = PurePath(filename or "").suffix
    content_type = resolver.registry.by_extension(suffix) if suffix else None

    if content_type is None or not content_type.mime.startswith("video/"):
        logger.warning(f"Invalid movie extension: {filename}")
        raise UnsupportedMediaError(filename, "movie must be a .mov or .mp4 file")

    logger.info(f"Movie validation passed for {filename}: {content_type.mime}")
    return content_type
