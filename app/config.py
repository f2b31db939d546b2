"""
Application configuration using Pydantic Settings.

All environment variables are accessed through this config object.
Never use os.getenv() directly in business logic.
"""

import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from credential_engine.identity import SigningAlgorithm

_TMP = Path(tempfile.gettempdir())


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Signing identity
    SIGNING_ALGORITHM: SigningAlgorithm = Field(
        default="es256",
        description="C2PA signing algorithm (es256, es384, es512, ps256, ps384, ps512, ed25519)",
    )
    CERTIFICATE_PATH: Path = Field(
        default=Path("certs/es256_certs.pem"),
        description="PEM certificate chain used to sign manifests",
    )
    PRIVATE_KEY_PATH: Path = Field(
        default=Path("certs/es256_private.key"),
        description="PEM private key matching the certificate",
    )
    TSA_URL: Optional[str] = Field(
        default=None,
        description="RFC 3161 timestamp authority URL (optional)",
    )

    # Manifest Configuration
    TITLE_PREFIX: str = Field(
        default="c2pa-cam",
        description="Prefix of signed asset titles and scratch file names",
    )
    CLAIM_GENERATOR_NAME: str = Field(
        default="c2pa-cam",
        description="Application name recorded in the claim generator info",
    )

    # Scratch Configuration
    SCRATCH_DIR: Path = Field(
        default=_TMP / "c2pa-cam",
        description="Directory for signed scratch files",
    )
    SCRATCH_UNIQUE_NAMES: bool = Field(
        default=False,
        description="Append a per-call random suffix to scratch file names",
    )
    STAGING_DIR: Path = Field(
        default=_TMP / "c2pa-cam-uploads",
        description="Directory for uploaded movies awaiting signing",
    )
    FILE_TTL_HOURS: int = Field(
        default=24,
        description="Age after which leftover scratch and staging files are removed",
    )
    CLEANUP_INTERVAL_HOURS: int = Field(
        default=1,
        description="Interval between stale file sweeps",
    )

    # Application Configuration
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:5173"],
        description="CORS allowed origins",
    )
    MAX_UPLOAD_SIZE: int = Field(
        default=209715200,
        description="Maximum file upload size in bytes (200MB)",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level",
    )


# Global settings instance
settings = Settings()
