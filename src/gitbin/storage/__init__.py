"""Storage package for remote blob stores."""

from .base import BlobStore
from .factory import make_blob_store

__all__ = ["BlobStore", "make_blob_store"]
