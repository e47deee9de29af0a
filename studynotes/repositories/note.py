"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.attachment import Attachment
from studynotes.models.group import GroupNote
from studynotes.models.note import Note
from studynotes.models.tag import note_tags
from studynotes.repositories.base import BaseRepository


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, note_id: str, user_id: str) -> Note | None:
        result = await self.session.execute(
            select(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_owner(
        self,
        user_id: str,
        subject_id: str | None = None,
        tag_id: str | None = None,
        search: str | None = None,
        is_public: bool | None = None,
    ) -> list[Note]:
        """
        List a user's notes, most recently updated first.

        Args:
            user_id: Owner of the notes
            subject_id: Only notes under this subject
            tag_id: Only notes carrying this tag
            search: Case-insensitive substring of title or content
            is_public: Only notes with this visibility

        Returns:
            Notes matching every given filter
        """
        query = select(Note).where(Note.user_id == user_id)

        if subject_id is not None:
            query = query.where(Note.subject_id == subject_id)
        if tag_id is not None:
            query = query.where(
                Note.id.in_(select(note_tags.c.note_id).where(note_tags.c.tag_id == tag_id))
            )
        if search:
            pattern = _like_pattern(search)
            query = query.where(
                or_(
                    Note.title.ilike(pattern, escape="\\"),
                    Note.content.ilike(pattern, escape="\\"),
                )
            )
        if is_public is not None:
            query = query.where(Note.is_public == is_public)

        result = await self.session.execute(
            query.order_by(Note.updated_at.desc(), Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_by_subject(self, subject_id: str) -> list[Note]:
        result = await self.session.execute(
            select(Note)
            .where(Note.subject_id == subject_id)
            .order_by(Note.updated_at.desc(), Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def shared_group_ids(self, note_id: str) -> list[str]:
        """Groups the note is shared into."""
        result = await self.session.execute(
            select(GroupNote.group_id).where(GroupNote.note_id == note_id)
        )
        return list(result.scalars().all())

    async def attachment_paths(self, note_id: str) -> list[str]:
        result = await self.session.execute(
            select(Attachment.path).where(Attachment.note_id == note_id)
        )
        return list(result.scalars().all())
