"""Embedder backed by the c2pa-python library."""

import logging
from typing import BinaryIO, Callable

import c2pa
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, padding, rsa

from .embedder import Embedder
from .exceptions import EmbedError, EmbedErrorKind
from .identity import SigningIdentity
from .manifest import ManifestDescription

logger = logging.getLogger(__name__)

SIGNING_ALGORITHMS = {
    "es256": c2pa.C2paSigningAlg.ES256,
    "es384": c2pa.C2paSigningAlg.ES384,
    "es512": c2pa.C2paSigningAlg.ES512,
    "ps256": c2pa.C2paSigningAlg.PS256,
    "ps384": c2pa.C2paSigningAlg.PS384,
    "ps512": c2pa.C2paSigningAlg.PS512,
    "ed25519": c2pa.C2paSigningAlg.ED25519,
}

HASHES = {
    "256": hashes.SHA256,
    "384": hashes.SHA384,
    "512": hashes.SHA512,
}


def _classify(error: Exception) -> EmbedErrorKind:
    """Map a c2pa or I/O exception onto an embed error kind."""
    if isinstance(error, c2pa.C2paError.NotSupported):
        return EmbedErrorKind.UNSUPPORTED_FORMAT
    if isinstance(error, c2pa.C2paError.Signature):
        return EmbedErrorKind.IDENTITY_INVALID
    if isinstance(error, (c2pa.C2paError.Io, c2pa.C2paError.FileNotFound, OSError)):
        return EmbedErrorKind.IO_ERROR
    return EmbedErrorKind.INTERNAL


def make_sign_callback(identity: SigningIdentity) -> Callable[[bytes], bytes]:
    """Build the raw signing callback for ``identity``'s private key.

    Raises:
        EmbedError: identity-invalid if the key cannot be loaded or does not
            match the configured algorithm.
    """
    try:
        private_key = serialization.load_pem_private_key(
            identity.private_key_pem.encode("utf-8"), password=None
        )
    except (ValueError, TypeError) as e:
        raise EmbedError(f"Private key could not be loaded: {e}", EmbedErrorKind.IDENTITY_INVALID) from e

    algorithm = identity.algorithm
    if algorithm == "ed25519":
        if not isinstance(private_key, ed25519.Ed25519PrivateKey):
            raise EmbedError("ed25519 requires an Ed25519 key", EmbedErrorKind.IDENTITY_INVALID)
        return private_key.sign

    digest = HASHES[algorithm[2:]]()
    if algorithm.startswith("es"):
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise EmbedError(f"{algorithm} requires an EC key", EmbedErrorKind.IDENTITY_INVALID)
        return lambda data: private_key.sign(data, ec.ECDSA(digest))

    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise EmbedError(f"{algorithm} requires an RSA key", EmbedErrorKind.IDENTITY_INVALID)
    pss = padding.PSS(mgf=padding.MGF1(digest), salt_length=digest.digest_size)
    return lambda data: private_key.sign(data, pss, digest)


class C2paEmbedder(Embedder):
    """Signs and embeds manifests with ``c2pa.Builder`` and a callback signer."""

    def __init__(self, tsa_url: str | None = None) -> None:
        self.tsa_url = tsa_url or None

    @property
    def embedder_name(self) -> str:
        return "c2pa"

    def _create_signer(self, identity: SigningIdentity) -> "c2pa.Signer":
        if not identity.is_complete:
            raise EmbedError(
                "Certificate or private key is empty", EmbedErrorKind.IDENTITY_INVALID
            )

        callback = make_sign_callback(identity)
        try:
            return c2pa.Signer.from_callback(
                callback=callback,
                alg=SIGNING_ALGORITHMS[identity.algorithm],
                certs=identity.certificate_pem,
                tsa_url=self.tsa_url,
            )
        except Exception as e:
            raise EmbedError(f"Signer could not be created: {e}", EmbedErrorKind.IDENTITY_INVALID) from e

    def embed(
        self,
        manifest: ManifestDescription,
        source: BinaryIO,
        destination: BinaryIO,
        identity: SigningIdentity,
    ) -> None:
        signer = self._create_signer(identity)
        try:
            with signer, c2pa.Builder(manifest.to_manifest_json()) as builder:
                builder.sign(signer, manifest.format, source, destination)
        except EmbedError:
            raise
        except Exception as e:
            kind = _classify(e)
            logger.error(f"c2pa signing of {manifest.title} failed ({kind.value}): {e}")
            raise EmbedError(str(e), kind) from e

        logger.debug(f"Embedded manifest {manifest.title} as {manifest.format}")
