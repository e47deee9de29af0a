"""
Attachment Repository.

Data access for attachment metadata rows.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.attachment import Attachment
from studynotes.models.note import Note
from studynotes.repositories.base import BaseRepository


class AttachmentRepository(BaseRepository[Attachment]):
    """Repository for Attachment model."""

    model = Attachment

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_for_note_owner(self, attachment_id: str, user_id: str) -> Attachment | None:
        """Get an attachment only if its note belongs to the user."""
        result = await self.session.execute(
            select(Attachment)
            .join(Note, Note.id == Attachment.note_id)
            .where(Attachment.id == attachment_id, Note.user_id == user_id)
        )
        return result.scalar_one_or_none()
