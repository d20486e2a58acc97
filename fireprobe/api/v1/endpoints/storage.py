"""Blob storage endpoint (multipart form so uploads can carry a file)."""

from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from fireprobe.api.v1.dependencies import ConsoleDep
from fireprobe.application.dtos.requests import BlobRequest, UploadSource
from fireprobe.domain.enums import BlobAction
from fireprobe.schemas.operations import AcceptedResponse

router = APIRouter()


@router.post("", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def storage_operation(
    console: ConsoleDep,
    action: Annotated[BlobAction, Form()],
    path: Annotated[str, Form()] = "",
    limit: Annotated[int, Form(ge=0)] = 100,
    file: Annotated[UploadFile | None, File()] = None,
) -> AcceptedResponse:
    """Schedule a list/upload/download/delete/get-metadata operation."""
    source = None
    if file is not None and file.filename:
        content = await file.read()
        if len(content) > console.settings.max_upload_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds {console.settings.max_upload_size} bytes",
            )
        source = UploadSource(
            filename=file.filename,
            content=content,
            content_type=file.content_type or "application/octet-stream",
        )
    request = BlobRequest(path=path, action=action, limit=limit, file=source)
    console.dispatcher.spawn(console.blob.execute(request), name=f"storage.{action.value}")
    return AcceptedResponse()
