"""
Embedder abstraction for the sign-and-embed engine.

Defines the interface the signing coordinator drives, so the cryptographic
engine (c2pa-python by default) can be swapped out, e.g. in tests.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO

from .identity import SigningIdentity
from .manifest import ManifestDescription


class Embedder(ABC):
    """
    Abstract base class for content credential embedders.

    Implementations:
    - C2paEmbedder: c2pa-python Builder with a callback signer
    """

    @abstractmethod
    def embed(
        self,
        manifest: ManifestDescription,
        source: BinaryIO,
        destination: BinaryIO,
        identity: SigningIdentity,
    ) -> None:
        """
        Sign ``source`` with ``manifest`` and write the result to ``destination``.

        Blocks until the destination is completely written.

        Args:
            manifest: Manifest to embed; ``manifest.format`` is the container MIME type
            source: Readable, seekable stream with the original asset bytes
            destination: Writable stream opened for exclusive write
            identity: Credentials to sign the claim with

        Raises:
            EmbedError: With kind unsupported-format, identity-invalid,
                        io-error or internal
        """
        pass

    @property
    @abstractmethod
    def embedder_name(self) -> str:
        """
        Return embedder identifier for logs and health checks.

        Returns:
            str: Embedder name, e.g. "c2pa"
        """
        pass
