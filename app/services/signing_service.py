"""
Signing coordinator factory.

Builds the process-wide SigningCoordinator from configuration: the signing
identity is loaded once and shared read-only by every request.
"""

import logging

from credential_engine import (
    AssetMetadataResolver,
    ManifestBuilder,
    SigningCoordinator,
    load_signing_identity,
)
from credential_engine.embedder import Embedder

from app.config import Settings, settings

logger = logging.getLogger(__name__)

# Singleton coordinator instance
_coordinator_instance: SigningCoordinator | None = None


def build_coordinator(config: Settings, embedder: Embedder | None = None) -> SigningCoordinator:
    """
    Build a coordinator from settings.

    Args:
        config: Application settings
        embedder: Embedder to use; defaults to the c2pa-python embedder

    Returns:
        SigningCoordinator: Ready to sign; an incomplete identity is logged
                            and makes every signing attempt fall back
    """
    if embedder is None:
        from credential_engine.c2pa_embedder import C2paEmbedder

        embedder = C2paEmbedder(tsa_url=config.TSA_URL)

    identity = load_signing_identity(
        config.CERTIFICATE_PATH,
        config.PRIVATE_KEY_PATH,
        algorithm=config.SIGNING_ALGORITHM,
    )
    resolver = AssetMetadataResolver()
    builder = ManifestBuilder(
        registry=resolver.registry,
        title_prefix=config.TITLE_PREFIX,
        generator_name=config.CLAIM_GENERATOR_NAME,
    )

    logger.info(
        f"Initializing SigningCoordinator with {embedder.embedder_name} embedder, "
        f"scratch dir {config.SCRATCH_DIR}"
    )
    return SigningCoordinator(
        identity=identity,
        embedder=embedder,
        scratch_dir=lambda: config.SCRATCH_DIR,
        resolver=resolver,
        builder=builder,
        unique_names=config.SCRATCH_UNIQUE_NAMES,
    )


def get_coordinator() -> SigningCoordinator:
    """
    Get the configured coordinator instance.

    Uses singleton pattern so the identity is loaded once per process.

    Returns:
        SigningCoordinator: The shared coordinator
    """
    global _coordinator_instance

    if _coordinator_instance is None:
        _coordinator_instance = build_coordinator(settings)

    return _coordinator_instance


def set_coordinator(coordinator: SigningCoordinator | None) -> None:
    """
    Replace the coordinator singleton (startup wiring and tests).

    Passing None clears it, so the next get_coordinator() call builds a
    fresh one from settings.
    """
    global _coordinator_instance
    _coordinator_instance = coordinator
    logger.info("Coordinator singleton reset" if coordinator is None else "Coordinator singleton set")
