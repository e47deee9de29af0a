"""
Auth API Endpoints.

Registration and login. Both return the account and a bearer token.
"""

from fastapi import APIRouter

from studynotes.core.dependencies import DbSession, RequestId
from studynotes.core.security import issue_session
from studynotes.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from studynotes.schemas.base import ApiResponse, ResponseMetadata
from studynotes.schemas.user import UserResponse
from studynotes.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=201,
    summary="Register",
    description="Create an account with a university email address.",
)
async def register(
    data: RegisterRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    service = AuthService(db)
    user = await service.register(data.email, data.password, data.name)
    return ApiResponse(
        data=AuthResponse(user=UserResponse.model_validate(user), token=issue_session(user.id)),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Log in",
    description="Exchange email and password for a bearer token.",
)
async def login(
    data: LoginRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    service = AuthService(db)
    user = await service.verify_credentials(data.email, data.password)
    return ApiResponse(
        data=AuthResponse(user=UserResponse.model_validate(user), token=issue_session(user.id)),
        metadata=ResponseMetadata(request_id=request_id),
    )
