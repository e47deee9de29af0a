"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.config import get_upload_dir
from studynotes.core.database import get_db_session
from studynotes.core.exceptions import AuthenticationError
from studynotes.core.logging import get_logger
from studynotes.core.storage import FileStorage
from studynotes.models.user import User

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(request: Request) -> str | None:
    """Request ID assigned by RequestContextMiddleware."""
    return getattr(request.state, "request_id", None)


RequestId = Annotated[str | None, Depends(get_request_id)]


def get_file_storage() -> FileStorage:
    """Attachment store rooted at the configured upload directory."""
    return FileStorage(get_upload_dir())


FileStore = Annotated[FileStorage, Depends(get_file_storage)]


async def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
        AccountDeactivatedError: If the account is deactivated
    """
    from studynotes.services.auth import AuthService

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required")

    user = await AuthService(db).resolve_user(credentials.credentials)
    logger.debug("Request authenticated", extra={"user_id": user.id})
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
