"""Blob store client for S3-compatible object storage (AWS S3, MinIO, ...)."""

from dataclasses import dataclass, field
import logging
import os
from typing import Any, Optional, Self

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import BlobNotFoundError, BlobStoreError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


@dataclass(frozen=True)
class BlobStoreConfig:
    """Connection settings for the blob store.

    `endpoint_url` points at a non-AWS server such as MinIO; leave it unset for S3.
    Credentials left unset fall back to boto3's default credential chain.
    """

    bucket: str
    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            bucket=os.environ["BLOB_BUCKET"],
            endpoint_url=os.getenv("BLOB_ENDPOINT_URL") or None,
            region=os.getenv("BLOB_REGION") or None,
            access_key_id=os.getenv("BLOB_ACCESS_KEY_ID") or None,
            secret_access_key=os.getenv("BLOB_SECRET_ACCESS_KEY") or None,
        )


@dataclass
class S3BlobStore:
    """Stores document content as objects in a single bucket.

    SDK failures never leave this class: a missing object raises
    BlobNotFoundError, anything else BlobStoreError.
    """

    config: BlobStoreConfig
    client: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.config.bucket.strip():
            raise ValueError("Blob store bucket must not be empty")
        if self.client is None:
            self.client = boto3.client(
                "s3",
                endpoint_url=self.config.endpoint_url,
                region_name=self.config.region,
                aws_access_key_id=self.config.access_key_id,
                aws_secret_access_key=self.config.secret_access_key,
            )

    @property
    def bucket(self) -> str:
        return self.config.bucket

    def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Store `data` under `key`, replacing any existing object."""
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or DEFAULT_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as e:
            raise self._map_error(e, key, "put") from e
        logger.info(f"Stored blob {key} ({len(data)} bytes)")

    def get(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except (ClientError, BotoCoreError) as e:
            raise self._map_error(e, key, "get") from e

    def content_type(self, key: str) -> str:
        """The stored content type of an object, falling back to octet-stream."""
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._map_error(e, key, "head") from e
        return response.get("ContentType") or DEFAULT_CONTENT_TYPE

    def exists(self, key: str) -> bool:
        try:
            self.content_type(key)
        except BlobNotFoundError:
            return False
        return True

    def delete(self, key: str) -> bool:
        """Delete an object. Returns False if there was nothing to delete."""
        if not self.exists(key):
            logger.warning(f"Blob {key} already absent, nothing to delete")
            return False
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._map_error(e, key, "delete") from e
        logger.info(f"Deleted blob {key}")
        return True

    def _map_error(self, error: Exception, key: str, action: str) -> BlobStoreError:
        if isinstance(error, ClientError):
            code = str(error.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                return BlobNotFoundError(key)
            logger.error(f"Blob store {action} failed for {key}: code={code}")
            return BlobStoreError(f"Blob store {action} failed (code={code})")
        logger.error(f"Blob store {action} failed for {key}: {error}")
        return BlobStoreError(f"Blob store {action} failed")
