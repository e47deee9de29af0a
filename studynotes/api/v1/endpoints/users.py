"""
User API Endpoints.

The caller's own profile and account.
"""

from fastapi import APIRouter

from studynotes.core.dependencies import CurrentUser, DbSession, FileStore, RequestId
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.user import ProfileUpdate, UserResponse
from studynotes.services.user import UserService

router = APIRouter()


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Get profile",
)
async def get_profile(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    profile = await UserService(db).get_profile(user)
    return ApiResponse(
        data=UserResponse.model_validate(profile),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Update profile",
    description="Change name and/or avatar. Omitted fields are left unchanged.",
)
async def update_profile(
    data: ProfileUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    profile = await UserService(db).update_profile(user, data.model_dump(exclude_unset=True))
    return ApiResponse(
        data=UserResponse.model_validate(profile),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/me",
    status_code=204,
    summary="Delete account",
    description="Permanently delete the account with all its notes, subjects, tags, groups and files.",
)
async def delete_account(
    user: CurrentUser,
    db: DbSession,
    storage: FileStore,
) -> None:
    await UserService(db, storage).delete_account(user)
