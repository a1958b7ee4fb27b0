"""
Bucket listing with per-object URL signing.

Listing is split into two steps:
- iter_objects walks the store's paginated listing and yields objects
  lazily, one page at a time
- sign_object maps a single object to a FileEntry with a fresh URL

collect_file_entries glues them together. Any failure aborts the whole
listing, so callers never see a partial result.
"""

import logging
from contextlib import aclosing
from typing import AsyncIterator, Optional

from ...infrastructure.storage.client import (
    StorageClient,
    StorageError,
    StoredObject,
)
from .models import FileEntry

logger = logging.getLogger(__name__)

SIGNED_URL_EXPIRY_SECONDS = 3600


async def iter_objects(storage: StorageClient) -> AsyncIterator[StoredObject]:
    """
    Yield every object in the bucket, following continuation tokens.

    Starts with no token and stops at the first non-truncated page. An
    empty bucket yields nothing.

    Raises:
        StorageError: if a list call fails, or the store reports a
            truncated page without a token to continue from.
    """
    token: Optional[str] = None
    page_count = 0

    while True:
        page = await storage.list_objects(continuation_token=token)
        page_count += 1

        for obj in page.objects:
            yield obj

        if not page.is_truncated:
            break

        if not page.next_token:
            raise StorageError(
                "Listing truncated without a continuation token",
                detail={"page": page_count},
            )
        token = page.next_token

    logger.debug("Listed bucket", extra={"pages": page_count})


async def sign_object(
    storage: StorageClient,
    obj: StoredObject,
    expiry_seconds: int = SIGNED_URL_EXPIRY_SECONDS,
) -> FileEntry:
    """Build a listing entry with a freshly signed download URL."""
    url = await storage.presign_get(obj.key, expiry_seconds=expiry_seconds)
    return FileEntry(key=obj.key, url=url, last_modified=obj.last_modified)


async def collect_file_entries(
    storage: StorageClient,
    expiry_seconds: int = SIGNED_URL_EXPIRY_SECONDS,
) -> list[FileEntry]:
    """
    Produce the complete, flat file listing in store enumeration order.

    Raises:
        StorageError: if listing or signing fails for any object.
    """
    # Close the page walk even when signing fails part way through
    async with aclosing(iter_objects(storage)) as objects:
        entries = [
            await sign_object(storage, obj, expiry_seconds)
            async for obj in objects
        ]

    logger.info("Collected file listing", extra={"count": len(entries)})

    return entries
