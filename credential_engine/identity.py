"""Signing identity: the certificate chain, private key and algorithm used to sign."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

SigningAlgorithm = Literal["es256", "es384", "es512", "ps256", "ps384", "ps512", "ed25519"]


class SigningIdentity(BaseModel):
    """Read-only signing credentials, loaded once at process start."""

    model_config = ConfigDict(frozen=True)

    algorithm: SigningAlgorithm = "es256"
    certificate_pem: str = Field(default="", repr=False)
    private_key_pem: str = Field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        """Whether both the certificate chain and the private key are present."""
        return bool(self.certificate_pem.strip()) and bool(self.private_key_pem.strip())


def _read_resource(path: Path | None, name: str) -> str:
    if path is None:
        logger.warning(f"No {name} configured, signing will fail")
        return ""

    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"{name.capitalize()} not found at {path}, signing will fail")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {name} at {path}: {e}")
    return ""


def load_signing_identity(
    certificate_path: Path | None,
    private_key_path: Path | None,
    algorithm: SigningAlgorithm = "es256",
) -> SigningIdentity:
    """Load the signing identity from PEM files.

    A missing or unreadable file yields an empty credential instead of an
    error; the first signing attempt then fails with ``identity-invalid``.
    """
    identity = SigningIdentity(
        algorithm=algorithm,
        certificate_pem=_read_resource(certificate_path, "certificate"),
        private_key_pem=_read_resource(private_key_path, "private key"),
    )
    if identity.is_complete:
        logger.info(f"Loaded {algorithm} signing identity from {certificate_path}")
    return identity
