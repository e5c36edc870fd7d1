"""S3-compatible blob storage for uploaded document content."""

from .client import BlobStoreConfig, S3BlobStore
from .errors import BlobNotFoundError, BlobStoreError

__all__ = [
    "BlobStoreConfig",
    "S3BlobStore",
    "BlobNotFoundError",
    "BlobStoreError",
]
