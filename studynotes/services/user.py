"""
User Service.

Profile reads and updates, and account deletion.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.config import get_upload_dir
from studynotes.core.storage import FileStorage, stage_files_for_delete
from studynotes.models.user import User
from studynotes.repositories.user import UserRepository
from studynotes.services.base import BaseService, FieldViolations

AVATAR_MAX_LENGTH = 500


class UserService(BaseService):
    """Service for the caller's own account."""

    def __init__(self, session: AsyncSession, storage: FileStorage | None = None) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)
        self.storage = storage or FileStorage(get_upload_dir())

    async def get_profile(self, user: User) -> User:
        return user

    async def update_profile(self, user: User, patch: dict[str, Any]) -> User:
        """
        Change name and/or avatar. Absent keys are left alone.

        Raises:
            ValidationError: If a field is invalid
        """
        changes = {k: v for k, v in patch.items() if k in ("name", "avatar")}

        violations = FieldViolations()
        if "name" in changes:
            violations.check_length("name", changes["name"], min_length=1, max_length=100)
        if "avatar" in changes:
            violations.check_length("avatar", changes["avatar"], max_length=AVATAR_MAX_LENGTH)
        violations.raise_if_any()

        if not changes:
            return user
        if "name" in changes:
            changes["name"] = changes["name"].strip()

        self._log_operation("Updating profile", user_id=user.id, fields=list(changes))
        return await self._execute_db_operation(
            "update_profile",
            self.repo.update(user, **changes),
        )

    async def delete_account(self, user: User) -> None:
        """
        Delete the account and everything it owns.

        The database cascades remove notes, subjects, tags, owned groups,
        memberships and attachment rows. Every affected attachment file is
        staged first and purged when the transaction commits.

        Raises:
            StorageError: If an attachment file could not be staged
        """
        paths = await self.repo.attachment_paths(user.id)
        await stage_files_for_delete(self.session, self.storage, paths)

        self._log_operation("Deleting account", user_id=user.id, attachments=len(paths))
        await self._execute_db_operation("delete_account", self.repo.delete(user))
