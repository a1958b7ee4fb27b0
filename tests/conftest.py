"""
Shared fixtures.

Tests never touch a real bucket: endpoint tests swap the storage
dependency for the in-memory client, and S3 client tests use botocore's
Stubber.
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from filebucket.api.dependencies import get_storage_client, reset_storage_client
from filebucket.config.settings import get_settings
from filebucket.infrastructure.storage.client import MockStorageClient, StorageError


class RecordingStorageClient(MockStorageClient):
    """
    In-memory storage that records every call and can be told to fail.

    fail_on holds method names that raise StorageError instead of
    running.
    """

    def __init__(self, page_size: int = 1000, fail_on: Optional[set] = None) -> None:
        super().__init__(bucket_name="test-bucket", page_size=page_size)
        self.calls: list[tuple] = []
        self.fail_on = set(fail_on or ())

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self.fail_on:
            raise StorageError(f"{method} failed", detail={"method": method})

    async def list_objects(self, continuation_token=None):
        self._record("list_objects", continuation_token)
        return await super().list_objects(continuation_token)

    async def put_object(self, key, data, content_type="application/octet-stream"):
        self._record("put_object", key)
        await super().put_object(key, data, content_type)

    async def delete_object(self, key):
        self._record("delete_object", key)
        await super().delete_object(key)

    async def presign_get(self, key, expiry_seconds=3600):
        self._record("presign_get", key, expiry_seconds)
        return await super().presign_get(key, expiry_seconds)

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def content_type_of(self, key: str) -> str:
        """Content type recorded at upload."""
        return self._objects[key][1]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test in mock mode with a fresh settings cache."""
    monkeypatch.setenv("STORAGE_MOCK_MODE", "true")
    monkeypatch.setenv("BUCKET_NAME", "test-bucket")
    get_settings.cache_clear()
    reset_storage_client()
    yield
    get_settings.cache_clear()
    reset_storage_client()


@pytest.fixture
def storage() -> RecordingStorageClient:
    """Recording in-memory storage with small pages to force pagination."""
    return RecordingStorageClient(page_size=2)


@pytest.fixture
def make_storage():
    """Factory for recording storage that fails on chosen operations."""
    def _make(fail_on=(), page_size: int = 2) -> RecordingStorageClient:
        return RecordingStorageClient(page_size=page_size, fail_on=set(fail_on))
    return _make


@pytest.fixture
def make_client():
    """Factory for a TestClient whose storage dependency is overridden."""
    from filebucket.main import create_app

    def _make(storage_client) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_storage_client] = lambda: storage_client
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def client(make_client, storage) -> TestClient:
    return make_client(storage)
