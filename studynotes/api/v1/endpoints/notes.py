"""
Notes API Endpoints.

REST API endpoints for note management.
"""

from fastapi import APIRouter, Query

from studynotes.core.dependencies import CurrentUser, DbSession, FileStore, RequestId
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from studynotes.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="The caller's notes, most recently updated first. Filters combine.",
)
async def list_notes(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    subject_id: str | None = Query(default=None, description="Only notes under this subject"),
    tag_id: str | None = Query(default=None, description="Only notes with this tag"),
    search: str | None = Query(
        default=None,
        max_length=200,
        description="Case-insensitive match on title or content",
    ),
    is_public: bool | None = Query(default=None, description="Only public or only private notes"),
) -> ApiResponse[list[NoteResponse]]:
    """List the caller's notes."""
    notes = await NoteService(db).list_notes(
        user,
        subject_id=subject_id,
        tag_id=tag_id,
        search=search,
        is_public=is_public,
    )
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note, optionally under a subject and with tags.",
)
async def create_note(
    data: NoteCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await NoteService(db).create_note(
        user,
        title=data.title,
        content=data.content,
        subject_id=data.subject_id,
        tag_ids=data.tag_ids,
        is_public=data.is_public,
    )
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a note the caller owns, a public note, or one shared with the caller.",
)
async def get_note(
    note_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await NoteService(db).get_note(user, note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update a note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await NoteService(db).update_note(user, note_id, data.model_dump(exclude_unset=True))
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note and its attachments.",
)
async def delete_note(
    note_id: str,
    user: CurrentUser,
    db: DbSession,
    storage: FileStore,
) -> None:
    """Delete a note."""
    await NoteService(db, storage).delete_note(user, note_id)
