"""
FastAPI dependency injection.

Dependencies provide the storage client, file manager and configuration
to route handlers. Routes never build their own clients, so tests can
swap them through app.dependency_overrides.
"""

import logging
import threading
from typing import Annotated

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.files.manager import FileManager
from ..infrastructure.storage.client import (
    StorageClient,
    StorageConfig,
    create_storage_client,
)

logger = logging.getLogger(__name__)

# Process-wide storage client, created on first use and shared by every
# request. It only holds configuration and a boto3 client.
_storage_client = None
_storage_client_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """
    Provide the shared storage client.

    Returns either the S3 client or the mock client based on settings.
    In mock mode the shared instance is what keeps uploaded files
    around between requests.

    FastAPI runs this sync dependency in its threadpool, so creation is
    guarded: concurrent first requests must all get the same client.
    """
    global _storage_client

    if _storage_client is None:
        with _storage_client_lock:
            if _storage_client is None:
                config = StorageConfig(
                    access_key_id=settings.aws_access_key_id,
                    secret_access_key=settings.aws_secret_access_key,
                    bucket_name=settings.bucket_name,
                    endpoint_url=settings.aws_endpoint_url_s3,
                    region=settings.aws_region,
                    page_size=settings.storage_list_page_size,
                )
                _storage_client = create_storage_client(
                    config=config,
                    mock_mode=settings.storage_mock_mode,
                )
                logger.info(
                    "Created shared storage client",
                    extra={"mock_mode": settings.storage_mock_mode}
                )

    return _storage_client


def reset_storage_client() -> None:
    """Drop the shared client so the next request builds a fresh one."""
    global _storage_client
    with _storage_client_lock:
        _storage_client = None


def get_file_manager(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> FileManager:
    """Provide a FileManager bound to the shared storage client."""
    return FileManager(
        storage=storage,
        url_expiry_seconds=settings.presign_expiry_seconds,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
FileManagerDep = Annotated[FileManager, Depends(get_file_manager)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
