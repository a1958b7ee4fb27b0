"""
Object storage client for uploaded files.

Supports Tigris (S3-compatible) with mock mode for local development.
Any S3-compatible endpoint works since we only speak the S3 API through
boto3: point the endpoint setting at AWS, MinIO or R2 and nothing else
changes.

Mock mode keeps objects in memory, enabling API testing without
provisioning a bucket.
"""

import asyncio
import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol
from urllib.parse import quote, urlencode

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageError(Exception):
    """Raised when storage operations fail."""

    def __init__(self, message: str, detail: Optional[dict] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)


@dataclass
class StorageConfig:
    """
    Configuration for S3-compatible storage.

    Tigris uses 'auto' for region, like R2.
    """
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    region: str = "auto"
    page_size: Optional[int] = None


@dataclass(frozen=True)
class StoredObject:
    """One object as reported by a bucket listing."""
    key: str
    last_modified: datetime


@dataclass
class ObjectPage:
    """
    One page of a bucket listing.

    next_token is only meaningful when is_truncated is True.
    """
    objects: list[StoredObject] = field(default_factory=list)
    next_token: Optional[str] = None
    is_truncated: bool = False


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Handlers depend on this protocol rather than boto3 so tests can
    swap in the in-memory client.
    """

    async def list_objects(
        self,
        continuation_token: Optional[str] = None,
    ) -> ObjectPage:
        """Fetch one page of the bucket listing."""
        ...

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        """Store data under key, replacing any existing object."""
        ...

    async def delete_object(self, key: str) -> None:
        """Delete the object stored under key."""
        ...

    async def presign_get(
        self,
        key: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Generate a temporary download URL."""
        ...

    @property
    def bucket_name(self) -> str:
        ...


class S3StorageClient:
    """
    S3-compatible object storage client.

    Uses boto3 so the same code talks to Tigris, R2, MinIO or AWS S3.

    boto3 is synchronous, so every call runs in a worker thread via
    asyncio.to_thread and never blocks the event loop.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config

        # Tigris requires v4 signatures
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized S3 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    @property
    def bucket_name(self) -> str:
        return self._config.bucket_name

    async def list_objects(
        self,
        continuation_token: Optional[str] = None,
    ) -> ObjectPage:
        """
        Fetch one page of objects with ListObjectsV2.

        The caller owns the pagination loop; this method only translates
        a single response.
        """
        params = {'Bucket': self._config.bucket_name}
        if continuation_token:
            params['ContinuationToken'] = continuation_token
        if self._config.page_size:
            params['MaxKeys'] = self._config.page_size

        try:
            response = await asyncio.to_thread(
                self._s3_client.list_objects_v2, **params
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to list objects",
                extra={"bucket": self._config.bucket_name, "error": str(e)}
            )
            raise StorageError(
                f"List failed: {e}",
                detail={"bucket": self._config.bucket_name},
            )

        objects = [
            StoredObject(key=obj['Key'], last_modified=obj['LastModified'])
            for obj in response.get('Contents', [])
        ]

        return ObjectPage(
            objects=objects,
            next_token=response.get('NextContinuationToken'),
            is_truncated=bool(response.get('IsTruncated', False)),
        )

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        """Upload data to the bucket under key."""
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._config.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to upload object",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}", detail={"key": key})

        logger.info(
            "Uploaded object",
            extra={"key": key, "size_bytes": len(data)}
        )

    async def delete_object(self, key: str) -> None:
        """
        Delete an object.

        S3 reports success for keys that do not exist, so deleting twice
        is not an error.
        """
        try:
            await asyncio.to_thread(
                self._s3_client.delete_object,
                Bucket=self._config.bucket_name,
                Key=key,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to delete object",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Delete failed: {e}", detail={"key": key})

        logger.info("Deleted object", extra={"key": key})

    async def presign_get(
        self,
        key: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """
        Generate a temporary download URL.

        Signing happens locally with the configured credentials; no
        request is sent to the store.
        """
        try:
            return await asyncio.to_thread(
                self._s3_client.generate_presigned_url,
                'get_object',
                Params={
                    'Bucket': self._config.bucket_name,
                    'Key': key,
                },
                ExpiresIn=expiry_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(
                f"Presigned URL generation failed: {e}",
                detail={"key": key},
            )


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development and tests.

    Objects live in a dict kept in insertion order, and listings are
    split into pages of page_size so pagination is exercised the same
    way as against a real bucket. "Signed" URLs are mock URIs carrying
    an HMAC of the key and expiry.
    """

    def __init__(
        self,
        bucket_name: str = "mock-bucket",
        page_size: int = 1000,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")

        self._bucket_name = bucket_name
        self._page_size = page_size
        self._objects: dict[str, tuple[bytes, str, datetime]] = {}
        self._secret = b"mock-signing-key"
        logger.info("Initialized mock storage client (in-memory)")

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def list_objects(
        self,
        continuation_token: Optional[str] = None,
    ) -> ObjectPage:
        """Return one page; the token is the offset of the next page."""
        start = 0
        if continuation_token is not None:
            try:
                start = int(continuation_token)
            except ValueError:
                raise StorageError(
                    "Invalid continuation token",
                    detail={"continuation_token": continuation_token},
                )

        keys = list(self._objects)
        end = start + self._page_size
        objects = [
            StoredObject(key=key, last_modified=self._objects[key][2])
            for key in keys[start:end]
        ]
        is_truncated = end < len(keys)

        return ObjectPage(
            objects=objects,
            next_token=str(end) if is_truncated else None,
            is_truncated=is_truncated,
        )

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        """Store object in memory."""
        self._objects[key] = (data, content_type, datetime.now(timezone.utc))

        logger.debug(
            "Stored object in mock storage",
            extra={"key": key, "size_bytes": len(data)}
        )

    async def delete_object(self, key: str) -> None:
        """Remove object from memory; missing keys are ignored."""
        self._objects.pop(key, None)

        logger.debug("Deleted object from mock storage", extra={"key": key})

    async def presign_get(
        self,
        key: str,
        expiry_seconds: int = 3600,
    ) -> str:
        """Return a mock URL with an expiry and HMAC signature."""
        message = f"{self._bucket_name}/{key}:{expiry_seconds}".encode("utf-8")
        signature = hmac.new(self._secret, message, hashlib.sha256).hexdigest()
        query = urlencode({
            "X-Amz-Expires": expiry_seconds,
            "X-Amz-Signature": signature,
        })
        return f"mock://storage/{self._bucket_name}/{quote(key)}?{query}"

    async def get_object(self, key: str) -> bytes:
        """Retrieve object from memory."""
        if key not in self._objects:
            raise StorageError(f"Object not found: {key}", detail={"key": key})

        return self._objects[key][0]


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (S3 or Mock)
    """
    if mock_mode:
        if config is None:
            return MockStorageClient()
        return MockStorageClient(
            bucket_name=config.bucket_name or "mock-bucket",
            page_size=config.page_size or 1000,
        )

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3StorageClient(config)
