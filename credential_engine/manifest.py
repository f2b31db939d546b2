"""Build C2PA manifest descriptions for freshly captured assets."""

import json
import logging
import platform
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from . import __version__
from .content_types import ContentType, ContentTypeRegistry, get_registry
from .exceptions import MetadataUnavailableError

logger = logging.getLogger(__name__)

ACTIONS_LABEL = "c2pa.actions"
ACTION_CREATED = "c2pa.created"
DIGITAL_CAPTURE = "http://cv.iptc.org/newscodes/digitalsourcetype/digitalCapture"

DEFAULT_TITLE_PREFIX = "c2pa-cam"
DEFAULT_GENERATOR_NAME = "c2pa-cam"


class Action(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: str
    digital_source_type: str = Field(..., alias="digitalSourceType")


class ActionsAssertion(BaseModel):
    """A ``c2pa.actions`` assertion listing what happened to the asset."""

    model_config = ConfigDict(frozen=True)

    label: str = ACTIONS_LABEL
    actions: tuple[Action, ...] = Field(..., min_length=1)

    def to_manifest_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "data": {"actions": [a.model_dump(by_alias=True) for a in self.actions]},
        }


class ClaimGeneratorInfo(BaseModel):
    """Identity of the software that produced the claim."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    operating_system: str


class ManifestDescription(BaseModel):
    """Immutable description of the manifest to embed into one asset."""

    model_config = ConfigDict(frozen=True)

    assertions: tuple[ActionsAssertion, ...] = Field(..., min_length=1)
    claim_generator_info: tuple[ClaimGeneratorInfo, ...] = Field(..., min_length=1)
    format: str
    title: str
    extension: str = Field(..., exclude=True)

    @model_validator(mode="after")
    def _title_matches_format(self) -> "ManifestDescription":
        if not self.title.endswith(f".{self.extension}"):
            raise ValueError(f"Title {self.title!r} does not end in .{self.extension}")
        return self

    def to_manifest_dict(self) -> dict[str, Any]:
        """Manifest definition in the shape the embedding engine expects."""
        return {
            "claim_generator_info": [info.model_dump() for info in self.claim_generator_info],
            "format": self.format,
            "title": self.title,
            "assertions": [assertion.to_manifest_dict() for assertion in self.assertions],
        }

    def to_manifest_json(self) -> str:
        return json.dumps(self.to_manifest_dict(), sort_keys=True)


def default_operating_system() -> str:
    return f"{platform.system()} {platform.release()}".strip() or "unknown"


def format_timestamp(timestamp: datetime) -> str:
    """Filesystem-safe extended ISO-8601 stamp with milliseconds and UTC offset.

    ``2025-01-01T00:00:00.000+00:00`` becomes ``2025-01-01T00.00.00.000Z``.
    Naive timestamps are taken to be local time.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()

    text = timestamp.isoformat(timespec="milliseconds")
    if timestamp.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text.replace(":", ".")


class ManifestBuilder:
    """Turns ``(content type, timestamp)`` into a :class:`ManifestDescription`.

    Building is pure: the generator identity is fixed at construction, so the
    same inputs always produce an equal description.
    """

    def __init__(
        self,
        registry: ContentTypeRegistry | None = None,
        title_prefix: str = DEFAULT_TITLE_PREFIX,
        generator_name: str = DEFAULT_GENERATOR_NAME,
        generator_version: str = __version__,
        operating_system: str | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.title_prefix = title_prefix
        self.generator = ClaimGeneratorInfo(
            name=generator_name,
            version=generator_version,
            operating_system=operating_system or default_operating_system(),
        )

    def _lookup(self, content_type: ContentType | str | None) -> ContentType | None:
        if content_type is None or isinstance(content_type, ContentType):
            return content_type
        return self.registry.by_identifier(content_type) or self.registry.by_mime(content_type)

    def build(
        self,
        content_type: ContentType | str | None,
        timestamp: datetime | None,
    ) -> ManifestDescription:
        """Build the manifest description for one asset.

        Args:
            content_type: Registered content type, its identifier or its MIME type.
            timestamp: Capture instant of the asset.

        Returns:
            The manifest description.

        Raises:
            MetadataUnavailableError: If the content type has no registered
                MIME type and extension, or the timestamp is missing.
        """
        resolved = self._lookup(content_type)
        if resolved is None or not resolved.mime or not resolved.extensions:
            raise MetadataUnavailableError(f"No MIME type or extension for {content_type!r}")
        if timestamp is None:
            raise MetadataUnavailableError("Timestamp is missing")

        extension = resolved.preferred_extension
        title = f"{self.title_prefix}_{format_timestamp(timestamp)}.{extension}"

        return ManifestDescription(
            assertions=(
                ActionsAssertion(
                    actions=(Action(action=ACTION_CREATED, digital_source_type=DIGITAL_CAPTURE),)
                ),
            ),
            claim_generator_info=(self.generator,),
            format=resolved.mime,
            title=title,
            extension=extension,
        )
