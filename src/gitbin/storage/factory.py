"""Factory for creating blob storage instances."""

from pathlib import Path
from typing import Optional

from ..errors import ConfigError
from ..models import StoreConfiguration
from .base import BlobStore
from .fs import FilesystemBlobStore
from .s3 import S3BlobStore


def validate_s3_config(config: StoreConfiguration) -> None:
    """
    Early validation of S3 configuration.

    Args:
        config: Store configuration to validate

    Raises:
        ConfigError: If credentials are missing
    """
    if not config.access_key or not config.secret_key:
        raise ConfigError(
            "S3 access key and secret key are required. Set them in "
            ".git-bin/config.yaml or via GITBIN_ACCESS_KEY / GITBIN_SECRET_KEY"
        )


def make_blob_store(
    config: StoreConfiguration,
    base_dir: Optional[Path] = None,
) -> BlobStore:
    """
    Create blob store instance based on configuration.

    Args:
        config: Store configuration
        base_dir: Directory a relative fs bucket is resolved against
            (the project root); defaults to the working directory

    Returns:
        BlobStore instance for the configured provider

    Raises:
        ConfigError: If configuration is invalid or the provider is unknown
    """
    if config.provider == "s3":
        validate_s3_config(config)
        return S3BlobStore(config)

    elif config.provider == "fs":
        bucket = Path(config.bucket).expanduser()
        if base_dir is not None and not bucket.is_absolute():
            bucket = Path(base_dir) / bucket
        return FilesystemBlobStore(bucket)

    else:
        raise ConfigError(f"Provider {config.provider} not supported")
