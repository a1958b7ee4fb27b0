"""
File manager - the use cases behind the HTTP endpoints.

FileManager is stateless apart from the storage client it wraps, so a
single instance could serve every request; we still build one per
request since it costs nothing.
"""

import logging

from ...infrastructure.storage.client import StorageClient
from .listing import SIGNED_URL_EXPIRY_SECONDS, collect_file_entries
from .models import DataUrl, FileEntry

logger = logging.getLogger(__name__)


class FileManager:
    """
    List, upload and delete files in one bucket.

    Failures propagate as exceptions:
    - InvalidPayloadError when the request cannot be decoded
    - StorageError when the object store fails

    Nothing is returned for a failed operation, so a caller never gets
    a URL for an object that was not written.
    """

    def __init__(
        self,
        storage: StorageClient,
        url_expiry_seconds: int = SIGNED_URL_EXPIRY_SECONDS,
    ) -> None:
        self._storage = storage
        self._url_expiry_seconds = url_expiry_seconds

    async def list_files(self) -> list[FileEntry]:
        """All files in the bucket, each with a fresh signed URL."""
        return await collect_file_entries(
            self._storage,
            expiry_seconds=self._url_expiry_seconds,
        )

    async def upload(self, name: str, data: str) -> str:
        """
        Decode a data URL, store it under name and return a signed URL.

        The payload is decoded before touching the store, so malformed
        input never results in a write. An existing object with the same
        name is overwritten.
        """
        data_url = DataUrl.parse(data)

        await self._storage.put_object(
            name,
            data_url.payload,
            content_type=data_url.content_type,
        )

        url = await self._storage.presign_get(
            name,
            expiry_seconds=self._url_expiry_seconds,
        )

        logger.info(
            "Uploaded file",
            extra={
                "key": name,
                "size_bytes": len(data_url.payload),
                "content_type": data_url.content_type,
            }
        )

        return url

    async def delete(self, name: str) -> None:
        """Delete a file. Missing keys are not an error."""
        await self._storage.delete_object(name)

        logger.info("Deleted file", extra={"key": name})
