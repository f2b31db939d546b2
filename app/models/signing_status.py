"""
Signing Status Pydantic Model

Describes how the service is configured to sign, without exposing key material.
"""

from pydantic import BaseModel, Field


class SigningStatus(BaseModel):
    """
    Response model for GET /api/signing/status.
    """

    identityComplete: bool = Field(
        ...,
        description="Whether both certificate chain and private key are loaded",
    )
    algorithm: str = Field(
        ...,
        description="Signing algorithm, e.g. 'es256'",
    )
    embedder: str = Field(
        ...,
        description="Name of the embedding engine",
    )
    titlePrefix: str = Field(
        ...,
        description="Prefix of signed asset titles",
    )
    photoTypes: list[str] = Field(
        ...,
        description="MIME types accepted by POST /api/sign/photo",
    )
    movieTypes: list[str] = Field(
        ...,
        description="MIME types accepted by POST /api/sign/movie",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "identityComplete": True,
                "algorithm": "es256",
                "embedder": "c2pa",
                "titlePrefix": "c2pa-cam",
                "photoTypes": ["image/jpeg", "image/heic"],
                "movieTypes": ["video/quicktime", "video/mp4"],
            }
        }
    }
