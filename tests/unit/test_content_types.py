"""Unit tests for the content type registry."""

import pytest

from credential_engine import ContentTypeRegistry, MetadataUnavailableError, get_registry


def test_default_registry_loads() -> None:
    registry = get_registry()
    assert len(registry) > 0
    assert "public.jpeg" in registry


def test_lookups() -> None:
    registry = get_registry()

    jpeg = registry.by_identifier("public.jpeg")
    assert jpeg.mime == "image/jpeg"
    assert jpeg.preferred_extension == "jpg"
    assert registry.by_mime("IMAGE/JPEG") is jpeg
    assert registry.by_extension(".JPEG") is jpeg
    assert registry.by_extension("jpg") is jpeg
    assert registry.by_pillow_format("JPEG") is jpeg
    assert registry.by_pillow_format("MPO") is jpeg


def test_movie_types() -> None:
    registry = get_registry()
    assert registry.by_extension("mov").mime == "video/quicktime"
    assert registry.by_extension("mp4").mime == "video/mp4"


def test_unknown_lookups_return_none() -> None:
    registry = get_registry()
    assert registry.by_identifier("public.unknown") is None
    assert registry.by_mime("application/x-unknown") is None
    assert registry.by_extension("xyz") is None
    assert registry.by_pillow_format("TGA") is None


def test_every_entry_has_extension() -> None:
    for content_type in get_registry():
        assert content_type.extensions
        assert "." not in content_type.preferred_extension


def test_load_custom_file(tmp_path) -> None:
    path = tmp_path / "types.yaml"
    path.write_text(
        "content_types:\n"
        "  - identifier: org.example.raw\n"
        "    mime: image/x-example\n"
        "    extensions: [exr, ex]\n"
    )
    registry = ContentTypeRegistry.load(path)
    assert registry.by_extension("ex").identifier == "org.example.raw"
    assert registry.by_identifier("org.example.raw").preferred_extension == "exr"


def test_missing_file(tmp_path) -> None:
    with pytest.raises(MetadataUnavailableError):
        ContentTypeRegistry.load(tmp_path / "missing.yaml")


def test_malformed_file(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("content_types: [unclosed\n")
    with pytest.raises(MetadataUnavailableError):
        ContentTypeRegistry.load(path)
