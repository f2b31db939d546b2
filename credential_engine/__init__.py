"""Content credential signing for freshly captured photos and movies."""

__version__ = "0.1.0"

from .assets import MediaAsset, Movie, Photo
from .content_types import ContentType, ContentTypeRegistry, get_registry
from .coordinator import SigningCoordinator
from .embedder import Embedder
from .exceptions import (
    EmbedError,
    EmbedErrorKind,
    MetadataUnavailableError,
    ReadbackError,
    ScratchResourceUnavailableError,
    SigningError,
)
from .identity import SigningIdentity, load_signing_identity
from .manifest import ManifestBuilder, ManifestDescription, format_timestamp
from .metadata import AssetMetadata, AssetMetadataResolver
from .scratch import ScratchArtifact, resolve_scratch_dir

__all__ = [
    "__version__",
    "MediaAsset",
    "Movie",
    "Photo",
    "ContentType",
    "ContentTypeRegistry",
    "get_registry",
    "SigningCoordinator",
    "Embedder",
    "EmbedError",
    "EmbedErrorKind",
    "MetadataUnavailableError",
    "ReadbackError",
    "ScratchResourceUnavailableError",
    "SigningError",
    "SigningIdentity",
    "load_signing_identity",
    "ManifestBuilder",
    "ManifestDescription",
    "format_timestamp",
    "AssetMetadata",
    "AssetMetadataResolver",
    "ScratchArtifact",
    "resolve_scratch_dir",
]
