"""
Domain models for stored files.

These models have no dependencies on FastAPI or boto3. A listing entry
is derived from a stored object plus a freshly signed URL; it is never
persisted.
"""

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime

from .errors import InvalidPayloadError

DEFAULT_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class FileEntry:
    """One row of the file listing: key, signed URL and modification time."""
    key: str
    url: str
    last_modified: datetime

    @property
    def last_modified_display(self) -> str:
        """Store-native string form of the timestamp."""
        return str(self.last_modified)


@dataclass(frozen=True)
class DataUrl:
    """
    A decoded data-URL style payload: ``<prefix>,<base64 payload>``.

    The prefix is usually ``data:<media type>;base64`` as produced by
    FileReader.readAsDataURL in the browser, but any prefix is accepted.
    Only the part after the first comma is decoded.
    """
    media_type: str
    payload: bytes

    @classmethod
    def parse(cls, text: str) -> "DataUrl":
        """
        Split and decode a data URL.

        Raises:
            InvalidPayloadError: if there is no comma separator or the
                tail is not valid standard base64.
        """
        prefix, sep, encoded = text.partition(",")
        if not sep:
            raise InvalidPayloadError(
                "data must be of the form <prefix>,<base64 payload>",
                detail={"field": "data"},
            )

        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidPayloadError(
                f"data payload is not valid base64: {e}",
                detail={"field": "data"},
            )

        return cls(media_type=_media_type_from_prefix(prefix), payload=payload)

    @property
    def content_type(self) -> str:
        """Media type to store the object with."""
        return self.media_type or DEFAULT_MEDIA_TYPE


def _media_type_from_prefix(prefix: str) -> str:
    """Extract ``text/plain`` from ``data:text/plain;base64``."""
    if not prefix.startswith("data:"):
        return ""
    media_type = prefix[len("data:"):].split(";", 1)[0].strip()
    # Guard against junk ending up in the Content-Type header
    if "/" not in media_type or any(c.isspace() for c in media_type):
        return ""
    return media_type
