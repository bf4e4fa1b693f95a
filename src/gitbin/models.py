"""Data models for remote blob storage.

BlobDescriptor is a listing snapshot; StoreConfiguration is fixed for the
lifetime of a store.
"""

from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import REQUEST_TIMEOUT_SECONDS


# Receives percent complete (0..100) during a transfer
ProgressCallback = Callable[[int], None]


def no_progress(percent: int) -> None:
    """Progress callback that ignores updates."""


class BlobDescriptor(BaseModel):
    """A blob as reported by a listing: remote key and size."""
    model_config = ConfigDict(frozen=True)

    name: str
    size: int = Field(ge=0)


class StoreConfiguration(BaseModel):
    """
    Connection settings for one remote store.

    For provider "fs", bucket is the directory that holds the blobs and the
    credential fields are unused.
    """
    model_config = ConfigDict(frozen=True)

    provider: Literal["s3", "fs"] = "s3"
    region: str = "us-east-1"          # S3 system name
    secure: bool = True                # HTTPS when True, HTTP otherwise
    access_key: str = ""
    secret_key: str = Field(default="", repr=False)
    bucket: str
    endpoint_url: Optional[str] = None  # S3-compatible endpoints (MinIO etc.)
    request_timeout: float = Field(default=REQUEST_TIMEOUT_SECONDS, gt=0)

    @field_validator("bucket")
    @classmethod
    def validate_bucket(cls, v: str) -> str:
        """Bucket (or directory) name must be non-empty."""
        if not v or not v.strip():
            raise ValueError("bucket must not be empty")
        return v.strip()
