"""
File listing, upload and delete logic.

Exports the main classes and functions for convenient importing.
"""

from .errors import FileServiceError, InvalidPayloadError
from .listing import (
    SIGNED_URL_EXPIRY_SECONDS,
    collect_file_entries,
    iter_objects,
    sign_object,
)
from .manager import FileManager
from .models import DataUrl, FileEntry

__all__ = [
    "SIGNED_URL_EXPIRY_SECONDS",
    "DataUrl",
    "FileEntry",
    "FileManager",
    "FileServiceError",
    "InvalidPayloadError",
    "collect_file_entries",
    "iter_objects",
    "sign_object",
]
