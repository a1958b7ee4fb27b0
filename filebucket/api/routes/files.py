"""
File endpoints.

- GET  /api/files         list every file with a fresh signed URL
- POST /api/upload_files  store a base64 data URL under a key
- POST /api/delete_file   delete a key

The JSON field names (Key, Url, LastModified, imageUrl) are part of the
contract with the bundled front-end, hence the aliases.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import FileManagerDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class FileEntryResponse(BaseModel):
    """One file in the listing."""
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(alias="Key", description="Object key")
    url: str = Field(alias="Url", description="Signed download URL, valid for one hour")
    last_modified: str = Field(
        alias="LastModified",
        description="Modification time as reported by the store"
    )


class UploadFileRequest(BaseModel):
    """Upload request: a data URL and the key to store it under."""
    data: str = Field(
        description="Data URL of the form <prefix>,<base64 payload>",
        examples=["data:text/plain;base64,aGVsbG8="],
    )
    name: str = Field(
        min_length=1,
        description="Object key. Existing objects are overwritten.",
        examples=["hello.txt"],
    )


class UploadFileResponse(BaseModel):
    """Signed URL for the file that was just stored."""
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")


class DeleteFileRequest(BaseModel):
    """Delete request."""
    name: str = Field(min_length=1, description="Object key to delete")


class DeleteFileResponse(BaseModel):
    message: str = "ok"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/files",
    response_model=list[FileEntryResponse],
    summary="List files",
    description="Returns every object in the bucket with a freshly signed download URL.",
)
async def list_files(manager: FileManagerDep) -> list[FileEntryResponse]:
    """
    List all files.

    The whole bucket is walked on every call; a listing failure fails
    the request instead of returning a partial list.
    """
    entries = await manager.list_files()

    return [
        FileEntryResponse(
            key=entry.key,
            url=entry.url,
            last_modified=entry.last_modified_display,
        )
        for entry in entries
    ]


@router.post(
    "/upload_files",
    response_model=UploadFileResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a file",
    description="Decodes a base64 data URL, stores it and returns a signed URL.",
)
async def upload_file(
    request: UploadFileRequest,
    manager: FileManagerDep,
) -> UploadFileResponse:
    logger.info("Received upload request", extra={"key": request.name})

    url = await manager.upload(name=request.name, data=request.data)

    return UploadFileResponse(image_url=url)


@router.post(
    "/delete_file",
    response_model=DeleteFileResponse,
    summary="Delete a file",
    description="Deletes the object. Deleting a missing key succeeds.",
)
async def delete_file(
    request: DeleteFileRequest,
    manager: FileManagerDep,
) -> DeleteFileResponse:
    logger.info("Received delete request", extra={"key": request.name})

    await manager.delete(request.name)

    return DeleteFileResponse(message="ok")
