"""
User Repository.

Data access for accounts.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.attachment import Attachment
from studynotes.models.note import Note
from studynotes.models.user import User
from studynotes.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup. Emails are stored lower-cased."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def attachment_paths(self, user_id: str) -> list[str]:
        """
        Paths of every file an account deletion removes.

        Covers files the user uploaded and files attached to the user's
        notes, whoever uploaded them.
        """
        result = await self.session.execute(
            select(Attachment.path)
            .outerjoin(Note, Note.id == Attachment.note_id)
            .where(or_(Attachment.user_id == user_id, Note.user_id == user_id))
            .distinct()
        )
        return list(result.scalars().all())
