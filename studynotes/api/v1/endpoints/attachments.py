"""
Attachments API Endpoints.

Upload, download and delete files bound to notes.
"""

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import FileResponse

from studynotes.core.config import get_app_config
from studynotes.core.dependencies import CurrentUser, DbSession, FileStore, RequestId
from studynotes.schemas.attachment import AttachmentResponse
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.services.attachment import AttachmentService, validate_upload

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[AttachmentResponse],
    status_code=201,
    summary="Upload an attachment",
    description="Attach a file (max 10 MiB; images, PDF, Word, text, zip) to one of the caller's notes.",
)
async def upload_attachment(
    user: CurrentUser,
    db: DbSession,
    storage: FileStore,
    request_id: RequestId,
    file: UploadFile = File(..., description="The file to attach"),
    note_id: str = Form(..., description="Target note"),
) -> ApiResponse[AttachmentResponse]:
    max_bytes = get_app_config().storage.max_upload_bytes
    filename = file.filename or ""
    content_type = file.content_type or ""

    # Reject oversized bodies without buffering more than one byte past the limit
    if file.size is not None:
        validate_upload(filename, content_type, file.size)
    data = await file.read(max_bytes + 1)

    attachment = await AttachmentService(db, storage).attach(
        user,
        note_id=note_id,
        data=data,
        original_name=filename,
        mime_type=content_type,
    )
    return ApiResponse(
        data=AttachmentResponse.model_validate(attachment),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{attachment_id}",
    response_class=FileResponse,
    summary="Download an attachment",
    description="Stream the file. Only the owner of the note may download it.",
)
async def download_attachment(
    attachment_id: str,
    user: CurrentUser,
    db: DbSession,
    storage: FileStore,
) -> FileResponse:
    attachment, path = await AttachmentService(db, storage).fetch(user, attachment_id)
    return FileResponse(
        path,
        media_type=attachment.mime_type,
        filename=attachment.original_name,
    )


@router.delete(
    "/{attachment_id}",
    status_code=204,
    summary="Delete an attachment",
    description="Delete the attachment row and its file.",
)
async def delete_attachment(
    attachment_id: str,
    user: CurrentUser,
    db: DbSession,
    storage: FileStore,
) -> None:
    await AttachmentService(db, storage).remove(user, attachment_id)
