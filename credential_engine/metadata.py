"""Derive the content type and capture timestamp of a media asset."""

import io
import logging
import math
import time
from datetime import datetime, timedelta
from typing import Callable

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict

from .assets import MediaAsset, Movie, Photo
from .content_types import ContentType, ContentTypeRegistry, get_registry
from .exceptions import MetadataUnavailableError

logger = logging.getLogger(__name__)

# ISO base media file brands Pillow cannot open without plugins.
HEIC_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis", b"hevm", b"hevs"}
HEIF_BRANDS = {b"mif1", b"msf1"}
AVIF_BRANDS = {b"avif", b"avis"}


class AssetMetadata(BaseModel):
    """What a manifest needs to know about an asset."""

    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    timestamp: datetime


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _ftyp_brands(data: bytes) -> list[bytes]:
    """Return the major and compatible brands of an ISO-BMFF ``ftyp`` box."""
    if len(data) < 12 or data[4:8] != b"ftyp":
        return []

    box_size = int.from_bytes(data[0:4], "big")
    end = min(box_size, len(data)) if box_size >= 16 else 12
    brands = [data[8:12]]
    for offset in range(16, end - 3, 4):
        brands.append(data[offset:offset + 4])
    return brands


class AssetMetadataResolver:
    """Resolves ``(content type, timestamp)`` for photos and movies.

    Photos are identified by sniffing their container header, never by a
    filename. Their capture time is expressed on the host monotonic clock and
    is translated to wall-clock time against the current offset between the
    two clocks. Movies are identified by the registered type of their file
    extension and stamped with the file's modification time.
    """

    def __init__(
        self,
        registry: ContentTypeRegistry | None = None,
        wall_clock: Callable[[], datetime] = _local_now,
        host_clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.registry = registry or get_registry()
        self._wall_clock = wall_clock
        self._host_clock = host_clock

    def resolve(self, asset: MediaAsset) -> AssetMetadata:
        """Return the metadata of ``asset``.

        Raises:
            MetadataUnavailableError: If the content type or timestamp
                cannot be derived.
        """
        if isinstance(asset, Photo):
            content_type = self.sniff_photo_type(asset.data)
            timestamp = self.capture_date(asset.capture_time)
        elif isinstance(asset, Movie):
            content_type = self.registry.by_extension(asset.path.suffix)
            timestamp = self.modification_date(asset)
        else:
            raise MetadataUnavailableError(f"Unsupported asset type: {type(asset).__name__}")

        if content_type is None:
            raise MetadataUnavailableError(f"Content type of {asset.kind} could not be detected")
        if timestamp is None:
            raise MetadataUnavailableError(f"Timestamp of {asset.kind} is not available")

        return AssetMetadata(content_type=content_type, timestamp=timestamp)

    def sniff_photo_type(self, data: bytes) -> ContentType | None:
        brands = _ftyp_brands(data)
        if brands:
            for brand in brands:
                if brand in HEIC_BRANDS:
                    return self.registry.by_identifier("public.heic")
                if brand in AVIF_BRANDS:
                    return self.registry.by_identifier("public.avif")
                if brand in HEIF_BRANDS:
                    return self.registry.by_identifier("public.heif")

        try:
            with Image.open(io.BytesIO(data)) as image:
                pillow_format = image.format
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.debug(f"Photo container not recognised: {e}")
            return None

        if not pillow_format:
            return None
        return self.registry.by_pillow_format(pillow_format)

    def capture_date(self, capture_time: float) -> datetime | None:
        """Translate a host-clock capture instant into local wall-clock time."""
        if not math.isfinite(capture_time):
            return None
        try:
            offset = timedelta(seconds=capture_time - self._host_clock())
            return self._wall_clock() + offset
        except (OverflowError, ValueError) as e:
            logger.debug(f"Capture time {capture_time} is out of range: {e}")
            return None

    def modification_date(self, movie: Movie) -> datetime | None:
        try:
            return datetime.fromtimestamp(movie.path.stat().st_mtime).astimezone()
        except (OverflowError, ValueError, OSError) as e:
            logger.debug(f"No modification time for {movie.path}: {e}")
            return None
