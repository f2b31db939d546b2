"""Registry of content types the signing pipeline can name in a manifest."""

import logging
from pathlib import Path
from typing import Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import MetadataUnavailableError

logger = logging.getLogger(__name__)

REGISTRY_PATH = Path(__file__).parent / "content_types.yaml"


class ContentType(BaseModel):
    """A registered content type with its canonical MIME type and extensions."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    mime: str
    extensions: tuple[str, ...] = Field(..., min_length=1)
    pillow_formats: tuple[str, ...] = ()

    @property
    def preferred_extension(self) -> str:
        return self.extensions[0]


class ContentTypeRegistry:
    """Lookup table between identifiers, MIME types, extensions and Pillow formats."""

    def __init__(self, content_types: list[ContentType]) -> None:
        self._by_identifier = {ct.identifier: ct for ct in content_types}
        self._by_mime = {ct.mime: ct for ct in content_types}
        self._by_extension: dict[str, ContentType] = {}
        self._by_pillow_format: dict[str, ContentType] = {}
        for ct in content_types:
            for ext in ct.extensions:
                self._by_extension.setdefault(ext.lower(), ct)
            for pillow_format in ct.pillow_formats:
                self._by_pillow_format.setdefault(pillow_format, ct)

    @classmethod
    def load(cls, path: Path = REGISTRY_PATH) -> "ContentTypeRegistry":
        """Load the registry from a YAML file.

        Raises:
            MetadataUnavailableError: If the registry file is missing or malformed.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            logger.error(f"Content type registry not found: {path}")
            raise MetadataUnavailableError(f"Content type registry not found: {path}") from e
        except yaml.YAMLError as e:
            logger.error(f"Error parsing {path.name}: {e}")
            raise MetadataUnavailableError(f"Error parsing {path.name}: {e}") from e

        entries = (data or {}).get("content_types", [])
        return cls([ContentType(**entry) for entry in entries])

    def by_identifier(self, identifier: str) -> ContentType | None:
        return self._by_identifier.get(identifier)

    def by_mime(self, mime: str) -> ContentType | None:
        return self._by_mime.get(mime.lower())

    def by_extension(self, extension: str) -> ContentType | None:
        return self._by_extension.get(extension.lower().lstrip("."))

    def by_pillow_format(self, pillow_format: str) -> ContentType | None:
        return self._by_pillow_format.get(pillow_format)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_identifier

    def __iter__(self) -> Iterator[ContentType]:
        return iter(self._by_identifier.values())

    def __len__(self) -> int:
        return len(self._by_identifier)


_default_registry: ContentTypeRegistry | None = None


def get_registry() -> ContentTypeRegistry:
    """Return the process-wide registry, loading it on first use."""
    global _default_registry

    if _default_registry is None:
        _default_registry = ContentTypeRegistry.load()
        logger.debug(f"Loaded {len(_default_registry)} content types")

    return _default_registry
