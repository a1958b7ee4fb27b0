"""
Exceptions raised by the file-handling layer.

Every failure a request can hit is one of two kinds: the caller sent
something we cannot use (InvalidPayloadError), or the object store let
us down (StorageError, raised by the storage clients). The API layer
maps each kind to a single status code.
"""

from typing import Optional


class FileServiceError(Exception):
    """Base exception for file-handling errors."""

    def __init__(self, message: str, detail: Optional[dict] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(self.message)


class InvalidPayloadError(FileServiceError):
    """Request payload is malformed (bad data URL or base64)."""
