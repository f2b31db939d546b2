"""Media asset values handed to the signing pipeline by the capture layer."""

import io
from pathlib import Path
from typing import BinaryIO, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Movie(BaseModel):
    """A movie clip backed by a file on disk."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["movie"] = "movie"
    path: Path = Field(..., description="On-disk backing location of the clip")

    def open_source(self) -> BinaryIO:
        """Open the backing file read-only, never truncating or creating it."""
        return open(self.path, "rb")


class Photo(BaseModel):
    """A still photo held in memory, optionally paired with a live-motion clip."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["photo"] = "photo"
    data: bytes = Field(..., description="Encoded image container bytes")
    capture_time: float = Field(
        ...,
        description="Capture instant in seconds on the host monotonic clock",
    )
    companion: Movie | None = Field(
        default=None,
        description="Live-motion companion clip, signed together with the photo",
    )

    def open_source(self) -> BinaryIO:
        return io.BytesIO(self.data)


MediaAsset = Union[Photo, Movie]
