"""
Tags API Endpoints.
"""

from fastapi import APIRouter

from studynotes.core.dependencies import CurrentUser, DbSession, RequestId
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.tag import TagCreate, TagResponse
from studynotes.services.tag import TagService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[TagResponse]],
    summary="List tags",
    description="The caller's tags by name, each with its live note count.",
)
async def list_tags(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[TagResponse]]:
    rows = await TagService(db).list_tags(user)
    return ApiResponse(
        data=[
            TagResponse.model_validate(tag).model_copy(update={"notes_count": count})
            for tag, count in rows
        ],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[TagResponse],
    status_code=201,
    summary="Create a tag",
)
async def create_tag(
    data: TagCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    tag = await TagService(db).create_tag(user, data.name)
    return ApiResponse(
        data=TagResponse.model_validate(tag),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{tag_id}",
    status_code=204,
    summary="Delete a tag",
    description="Remove the tag from every note and delete it.",
)
async def delete_tag(
    tag_id: str,
    user: CurrentUser,
    db: DbSession,
) -> None:
    await TagService(db).delete_tag(user, tag_id)
