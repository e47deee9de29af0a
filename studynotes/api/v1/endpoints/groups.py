"""
Groups API Endpoints.

Groups, their rosters, and the notes shared into them.
"""

from fastapi import APIRouter

from studynotes.core.dependencies import CurrentUser, DbSession, RequestId
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.group import (
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
    GroupUpdate,
    MemberAdd,
    MemberResponse,
    SharedNoteResponse,
    ShareNoteRequest,
)
from studynotes.schemas.note import NoteResponse
from studynotes.services.group import GroupService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[GroupListResponse],
    summary="List groups",
    description="Groups the caller owns and groups the caller belongs to.",
)
async def list_groups(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[GroupListResponse]:
    groups = await GroupService(db).list_groups(user)
    return ApiResponse(
        data=GroupListResponse(
            owned=[GroupResponse.model_validate(g) for g in groups["owned"]],
            member=[GroupResponse.model_validate(g) for g in groups["member"]],
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[GroupResponse],
    status_code=201,
    summary="Create a group",
    description="Create a group. The caller becomes its owner and admin.",
)
async def create_group(
    data: GroupCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[GroupResponse]:
    group = await GroupService(db).create_group(
        user,
        name=data.name,
        description=data.description,
        is_private=data.is_private,
    )
    return ApiResponse(
        data=GroupResponse.model_validate(group),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{group_id}",
    response_model=ApiResponse[GroupDetailResponse],
    summary="Get a group",
    description="A group with its roster and shared notes. Members only.",
)
async def get_group(
    group_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[GroupDetailResponse]:
    group, notes = await GroupService(db).get_group(user, group_id)
    detail = GroupDetailResponse.model_validate(group).model_copy(
        update={"notes": [NoteResponse.model_validate(note) for note in notes]}
    )
    return ApiResponse(data=detail, metadata=ResponseMetadata(request_id=request_id))


@router.api_route(
    "/{group_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[GroupResponse],
    summary="Update a group",
    description="Owner only. Only provided fields are updated.",
)
async def update_group(
    group_id: str,
    data: GroupUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[GroupResponse]:
    group = await GroupService(db).update_group(user, group_id, data.model_dump(exclude_unset=True))
    return ApiResponse(
        data=GroupResponse.model_validate(group),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{group_id}",
    status_code=204,
    summary="Delete a group",
    description="Owner only. Shared notes are not deleted.",
)
async def delete_group(
    group_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    await GroupService(db).delete_group(user, group_id)


@router.post(
    "/{group_id}/members",
    response_model=ApiResponse[MemberResponse],
    status_code=201,
    summary="Add a member",
    description="Owner only.",
)
async def add_member(
    group_id: str,
    data: MemberAdd,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[MemberResponse]:
    member = await GroupService(db).add_member(user, group_id, data.user_id, data.role)
    return ApiResponse(
        data=MemberResponse.model_validate(member),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{group_id}/members/{user_id}",
    status_code=204,
    summary="Remove a member",
    description="The owner removes any other member; members may remove themselves.",
)
async def remove_member(
    group_id: str,
    user_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    await GroupService(db).remove_member(user, group_id, user_id)


@router.get(
    "/{group_id}/notes",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List shared notes",
    description="Notes shared into the group. Members only.",
)
async def list_group_notes(
    group_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await GroupService(db).list_group_notes(user, group_id)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{group_id}/notes",
    response_model=ApiResponse[SharedNoteResponse],
    status_code=201,
    summary="Share a note",
    description="Share one of the caller's notes into a group the caller belongs to.",
)
async def share_note(
    group_id: str,
    data: ShareNoteRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SharedNoteResponse]:
    share = await GroupService(db).share_note(user, group_id, data.note_id)
    return ApiResponse(
        data=SharedNoteResponse.model_validate(share),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{group_id}/notes/{note_id}",
    status_code=204,
    summary="Unshare a note",
    description="Allowed for the note's owner and the group owner.",
)
async def unshare_note(
    group_id: str,
    note_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    await GroupService(db).unshare_note(user, group_id, note_id)
