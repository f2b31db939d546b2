"""Custom exceptions for the content credential signing pipeline."""

from enum import Enum


class SigningError(Exception):
    """Base exception for signing pipeline errors."""

    pass


class MetadataUnavailableError(SigningError):
    """Content type or capture timestamp could not be derived."""

    pass


class ScratchResourceUnavailableError(SigningError):
    """No writable scratch area for the signed destination."""

    pass


class EmbedErrorKind(str, Enum):
    """Failure categories reported by an embedder."""

    UNSUPPORTED_FORMAT = "unsupported-format"
    IDENTITY_INVALID = "identity-invalid"
    IO_ERROR = "io-error"
    INTERNAL = "internal"


class EmbedError(SigningError):
    """The embedder rejected or failed the sign-and-embed operation."""

    def __init__(self, message: str, kind: EmbedErrorKind = EmbedErrorKind.INTERNAL):
        self.kind = kind
        super().__init__(f"[{kind.value}] {message}")


class ReadbackError(SigningError):
    """The freshly written scratch file could not be read back."""

    pass
