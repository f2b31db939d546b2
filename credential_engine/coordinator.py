"""
Signing coordinator.

Drives a captured asset through manifest construction and the embedder, and
guarantees the caller gets back either a fully signed asset or the original,
untouched one.
"""

import logging
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, Iterable, Union

from .assets import MediaAsset, Movie, Photo
from .embedder import Embedder
from .exceptions import (
    EmbedError,
    EmbedErrorKind,
    MetadataUnavailableError,
    ReadbackError,
    ScratchResourceUnavailableError,
    SigningError,
)
from .identity import SigningIdentity
from .manifest import ManifestBuilder, ManifestDescription
from .metadata import AssetMetadataResolver
from .scratch import ScratchArtifact, resolve_scratch_dir

logger = logging.getLogger(__name__)

ScratchDirSource = Union[Path, str, Callable[[], Union[Path, str, None]]]


class SigningCoordinator:
    """
    Signs photos (with their live-motion companion) and movies.

    Every public method is total: failures are logged and degrade to
    returning the input asset unchanged. Scratch files created by a call
    never outlive it, except the signed movie file that becomes the new
    backing location of a returned :class:`Movie`.
    """

    def __init__(
        self,
        identity: SigningIdentity,
        embedder: Embedder,
        scratch_dir: ScratchDirSource,
        resolver: AssetMetadataResolver | None = None,
        builder: ManifestBuilder | None = None,
        unique_names: bool = False,
    ) -> None:
        self.identity = identity
        self.embedder = embedder
        self._scratch_dir_source = scratch_dir
        self.resolver = resolver or AssetMetadataResolver()
        self.builder = builder or ManifestBuilder(registry=self.resolver.registry)
        self.unique_names = unique_names

    def sign(self, asset: MediaAsset) -> MediaAsset:
        """Sign any supported asset, dispatching on its variant."""
        if isinstance(asset, Photo):
            return self.sign_photo(asset)
        if isinstance(asset, Movie):
            return self.sign_movie(asset)
        logger.error(f"Cannot sign unsupported asset type {type(asset).__name__}")
        return asset

    def sign_many(self, assets: Iterable[MediaAsset]) -> list[MediaAsset]:
        return [self.sign(asset) for asset in assets]

    def sign_photo(self, photo: Photo) -> Photo:
        """
        Sign a photo and, if present, its companion movie.

        The photo is signed and read back before the companion starts. A
        companion that cannot be signed stays as the original reference. If
        the photo itself cannot be signed the original photo is returned,
        with its original companion, and any signed companion is discarded.
        """
        scratch_dir = self._resolve_scratch_dir()
        if scratch_dir is None:
            return photo

        with ExitStack() as scratch:
            signed_data = None
            primary = self._sign_to_scratch(photo, scratch_dir, "photo", scratch)
            if primary is not None:
                try:
                    signed_data = self._read_back(primary)
                except ReadbackError as e:
                    logger.error(f"Photo signing failed at readback: {e}")
                primary.release()

            companion = None
            if photo.companion is not None:
                companion = self._sign_to_scratch(photo.companion, scratch_dir, "companion", scratch)

            if signed_data is None:
                if companion is not None:
                    logger.warning(
                        f"Discarding signed companion {companion.path.name}, photo signing failed"
                    )
                return photo

            new_companion = photo.companion
            if companion is not None:
                new_companion = Movie(path=companion.adopt())

            return photo.model_copy(update={"data": signed_data, "companion": new_companion})

    def sign_movie(self, movie: Movie) -> Movie:
        """
        Sign a movie.

        The signed file stays where it was written and becomes the returned
        movie's backing location; the original file is removed.
        """
        scratch_dir = self._resolve_scratch_dir()
        if scratch_dir is None:
            return movie

        with ExitStack() as scratch:
            artifact = self._sign_to_scratch(movie, scratch_dir, "movie", scratch)
            if artifact is None:
                return movie
            signed = Movie(path=artifact.adopt())

        self._remove_replaced_source(movie.path)
        return signed

    # Internals

    def _resolve_scratch_dir(self) -> Path | None:
        source = self._scratch_dir_source
        try:
            directory = source() if callable(source) else source
            return resolve_scratch_dir(directory)
        except (ScratchResourceUnavailableError, OSError) as e:
            logger.error(f"Scratch directory unavailable, leaving asset unsigned: {e}")
            return None

    def _manifest_for(self, asset: MediaAsset) -> ManifestDescription:
        metadata = self.resolver.resolve(asset)
        return self.builder.build(metadata.content_type, metadata.timestamp)

    def _sign_to_scratch(
        self,
        asset: MediaAsset,
        scratch_dir: Path,
        stage: str,
        scratch: ExitStack,
    ) -> ScratchArtifact | None:
        """
        Sign ``asset`` into a new scratch file registered with ``scratch``.

        Returns the written artifact, or None if the asset has to stay
        unsigned; in that case the scratch file is already removed.
        """
        try:
            manifest = self._manifest_for(asset)
        except MetadataUnavailableError as e:
            logger.error(f"Cannot build {stage} manifest, leaving it unsigned: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error building {stage} manifest: {e}")
            return None

        logger.debug(f"{stage} manifest: {manifest.to_manifest_json()}")

        artifact = scratch.enter_context(
            ScratchArtifact(scratch_dir, manifest.title, unique=self.unique_names)
        )
        started = time.perf_counter()
        try:
            self._embed(asset, manifest, artifact)
        except SigningError as e:
            logger.error(f"Signing {stage} {manifest.title} failed: {e}")
            artifact.release()
            return None
        except OSError as e:
            logger.error(f"Signing {stage} {manifest.title} failed with I/O error: {e}")
            artifact.release()
            return None
        except Exception as e:
            logger.exception(f"Unexpected error signing {stage} {manifest.title}: {e}")
            artifact.release()
            return None

        logger.info(
            f"Signed {stage} as {artifact.path.name} "
            f"in {time.perf_counter() - started:.3f}s using {self.embedder.embedder_name}"
        )
        return artifact

    def _embed(self, asset: MediaAsset, manifest: ManifestDescription, artifact: ScratchArtifact) -> None:
        with asset.open_source() as source, artifact.open() as destination:
            self.embedder.embed(manifest, source, destination, self.identity)

        if artifact.path.stat().st_size == 0:
            raise EmbedError(f"Embedder wrote nothing to {artifact.path.name}", EmbedErrorKind.INTERNAL)

    def _read_back(self, artifact: ScratchArtifact) -> bytes:
        try:
            return artifact.read_bytes()
        except OSError as e:
            raise ReadbackError(f"Cannot read {artifact.path}: {e}") from e

    def _remove_replaced_source(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            logger.debug(f"Removed replaced original {path}")
        except OSError as e:
            logger.error(f"Failed to remove replaced original {path}: {e}")
