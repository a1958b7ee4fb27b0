"""
Object storage integration for uploaded files.

Supports Tigris and any other S3-compatible store via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockStorageClient,
    ObjectPage,
    S3StorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    StoredObject,
    create_storage_client,
)

__all__ = [
    "MockStorageClient",
    "ObjectPage",
    "S3StorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "StoredObject",
    "create_storage_client",
]
