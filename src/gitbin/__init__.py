"""Remote blob storage client for git-bin.

Large files live in a remote object store under a key; the repository
keeps only the key. This package lists, uploads and downloads those blobs.
"""

from .constants import GITBIN_VERSION
from .errors import (
    AuthError,
    ConfigError,
    ErrorKind,
    GitBinError,
    IntegrityError,
    InvalidKeyError,
    NotFoundError,
    RemoteProtocolError,
    RetryExhaustedError,
    TransientStreamError,
)
from .models import BlobDescriptor, ProgressCallback, StoreConfiguration
from .storage import BlobStore, make_blob_store
from .storage.fs import FilesystemBlobStore
from .storage.s3 import S3BlobStore

__version__ = GITBIN_VERSION

__all__ = [
    "AuthError",
    "BlobDescriptor",
    "BlobStore",
    "ConfigError",
    "ErrorKind",
    "FilesystemBlobStore",
    "GitBinError",
    "IntegrityError",
    "InvalidKeyError",
    "NotFoundError",
    "ProgressCallback",
    "RemoteProtocolError",
    "RetryExhaustedError",
    "S3BlobStore",
    "StoreConfiguration",
    "TransientStreamError",
    "make_blob_store",
]
