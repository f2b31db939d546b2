"""Pydantic models for API response schemas."""

from .signing_status import SigningStatus

__all__ = [
    "SigningStatus",
]
