"""Unit tests for AssetMetadataResolver."""

import math
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from conftest import CAPTURE_HOST_TIME, CAPTURE_INSTANT
from credential_engine import AssetMetadataResolver, MetadataUnavailableError, Movie, Photo


def _ftyp(major: bytes, *compatible: bytes) -> bytes:
    body = major + b"\x00\x00\x00\x00" + b"".join(compatible)
    return (8 + len(body)).to_bytes(4, "big") + b"ftyp" + body + b"\x00" * 32


class TestSniffPhotoType:
    """Tests for container sniffing."""

    def test_jpeg(self, resolver, jpeg_bytes) -> None:
        assert resolver.sniff_photo_type(jpeg_bytes).mime == "image/jpeg"

    def test_png(self, resolver, png_bytes) -> None:
        assert resolver.sniff_photo_type(png_bytes).mime == "image/png"

    def test_multi_picture_jpeg(self, resolver, mpo_bytes) -> None:
        assert mpo_bytes.startswith(b"\xff\xd8")
        assert resolver.sniff_photo_type(mpo_bytes).identifier == "public.jpeg"

    def test_heic_major_brand(self, resolver) -> None:
        assert resolver.sniff_photo_type(_ftyp(b"heic", b"mif1", b"heic")).identifier == "public.heic"

    def test_heif_brand(self, resolver) -> None:
        assert resolver.sniff_photo_type(_ftyp(b"mif1", b"mif1")).identifier == "public.heif"

    def test_avif(self, resolver) -> None:
        assert resolver.sniff_photo_type(_ftyp(b"avif", b"mif1", b"miaf")).identifier == "public.avif"

    @pytest.mark.parametrize("data", [b"", b"plain text", b"\x00" * 10])
    def test_unrecognised(self, resolver, data) -> None:
        assert resolver.sniff_photo_type(data) is None


class TestCaptureDate:
    """Tests for host-clock to wall-clock translation."""

    def test_capture_at_host_now_is_wall_now(self, resolver) -> None:
        assert resolver.capture_date(CAPTURE_HOST_TIME) == CAPTURE_INSTANT

    def test_capture_in_the_past(self, resolver) -> None:
        assert resolver.capture_date(CAPTURE_HOST_TIME - 2.5) == CAPTURE_INSTANT - timedelta(seconds=2.5)

    def test_default_clocks_use_local_time(self) -> None:
        import time

        stamp = AssetMetadataResolver().capture_date(time.monotonic())
        assert stamp.tzinfo is not None
        assert abs((datetime.now(timezone.utc) - stamp).total_seconds()) < 5

    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_invalid_capture_time(self, resolver, value) -> None:
        assert resolver.capture_date(value) is None

    @pytest.mark.parametrize("value", [1e12, -1e12])
    def test_capture_time_out_of_range(self, resolver, value) -> None:
        assert resolver.capture_date(value) is None


class TestResolve:
    """Tests for resolve."""

    def test_photo(self, resolver, jpeg_bytes) -> None:
        metadata = resolver.resolve(Photo(data=jpeg_bytes, capture_time=CAPTURE_HOST_TIME))
        assert metadata.content_type.mime == "image/jpeg"
        assert metadata.timestamp == CAPTURE_INSTANT

    def test_photo_unknown_type(self, resolver) -> None:
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve(Photo(data=b"????", capture_time=CAPTURE_HOST_TIME))

    def test_photo_invalid_capture_time(self, resolver, jpeg_bytes) -> None:
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve(Photo(data=jpeg_bytes, capture_time=math.nan))

    def test_movie(self, resolver, movie_file) -> None:
        os.utime(movie_file, (1_700_000_000, 1_700_000_000))
        metadata = resolver.resolve(Movie(path=movie_file))

        assert metadata.content_type.mime == "video/quicktime"
        assert metadata.timestamp == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)
        assert metadata.timestamp.tzinfo is not None

    def test_movie_extension_case_insensitive(self, resolver, tmp_path) -> None:
        clip = tmp_path / "IMG_0001.MOV"
        clip.write_bytes(b"\x00")
        assert resolver.resolve(Movie(path=clip)).content_type.identifier == "com.apple.quicktime-movie"

    def test_movie_mtime_out_of_range(self, resolver, movie_file) -> None:
        with patch("credential_engine.metadata.datetime") as fake_datetime:
            fake_datetime.fromtimestamp.side_effect = OverflowError("timestamp out of range")
            with pytest.raises(MetadataUnavailableError):
                resolver.resolve(Movie(path=movie_file))

    def test_movie_missing_file(self, resolver, tmp_path) -> None:
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve(Movie(path=tmp_path / "missing.mov"))

    def test_movie_unknown_extension(self, resolver, tmp_path) -> None:
        clip = tmp_path / "clip.xyz"
        clip.write_bytes(b"\x00")
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve(Movie(path=clip))

    def test_movie_without_extension(self, resolver, tmp_path) -> None:
        clip = tmp_path / "clip"
        clip.write_bytes(b"\x00")
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve(Movie(path=clip))

    def test_unsupported_asset(self, resolver) -> None:
        with pytest.raises(MetadataUnavailableError):
            resolver.resolve("not an asset")
