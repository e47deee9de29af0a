"""
Subjects API Endpoints.
"""

from fastapi import APIRouter

from studynotes.core.dependencies import CurrentUser, DbSession, RequestId
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.note import NoteResponse
from studynotes.schemas.subject import (
    SubjectCreate,
    SubjectDetailResponse,
    SubjectResponse,
    SubjectUpdate,
)
from studynotes.services.subject import SubjectService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[SubjectResponse]],
    summary="List subjects",
    description="The caller's subjects by name, each with its live note count.",
)
async def list_subjects(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[SubjectResponse]]:
    rows = await SubjectService(db).list_subjects(user)
    return ApiResponse(
        data=[
            SubjectResponse.model_validate(subject).model_copy(update={"notes_count": count})
            for subject, count in rows
        ],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{subject_id}",
    response_model=ApiResponse[SubjectDetailResponse],
    summary="Get a subject",
    description="A subject with its notes, most recently updated first.",
)
async def get_subject(
    subject_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SubjectDetailResponse]:
    subject, notes = await SubjectService(db).get_subject(user, subject_id)
    detail = SubjectDetailResponse.model_validate(subject).model_copy(
        update={
            "notes_count": len(notes),
            "notes": [NoteResponse.model_validate(note) for note in notes],
        }
    )
    return ApiResponse(data=detail, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "",
    response_model=ApiResponse[SubjectResponse],
    status_code=201,
    summary="Create a subject",
)
async def create_subject(
    data: SubjectCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SubjectResponse]:
    subject = await SubjectService(db).create_subject(
        user,
        name=data.name,
        description=data.description,
        color=data.color,
    )
    return ApiResponse(
        data=SubjectResponse.model_validate(subject),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.api_route(
    "/{subject_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[SubjectResponse],
    summary="Update a subject",
    description="Only provided fields are updated.",
)
async def update_subject(
    subject_id: str,
    data: SubjectUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SubjectResponse]:
    service = SubjectService(db)
    subject = await service.update_subject(user, subject_id, data.model_dump(exclude_unset=True))
    count = await service.repo.count_notes(subject.id)
    return ApiResponse(
        data=SubjectResponse.model_validate(subject).model_copy(update={"notes_count": count}),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{subject_id}",
    status_code=204,
    summary="Delete a subject",
    description="Delete a subject. Its notes are kept without a subject.",
)
async def delete_subject(
    subject_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    await SubjectService(db).delete_subject(user, subject_id)
