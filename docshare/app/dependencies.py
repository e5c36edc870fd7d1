import logging
from functools import lru_cache

from docshare.integrations.blob import BlobStoreConfig, S3BlobStore
from .env_loader import (
    get_max_upload_bytes,
    get_restrict_document_edits,
    get_restrict_search,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _shared_blob_store() -> S3BlobStore:
    config = BlobStoreConfig.from_env()
    logger.info(f"Using blob bucket {config.bucket}")
    return S3BlobStore(config=config)


def blob_store() -> S3BlobStore:
    """The blob store for document content, created on first use."""
    return _shared_blob_store()


def max_upload_bytes() -> int:
    return get_max_upload_bytes()


def restrict_document_edits() -> bool:
    """Whether update/share are limited to the owner and admins."""
    return get_restrict_document_edits()


def restrict_search() -> bool:
    return get_restrict_search()
