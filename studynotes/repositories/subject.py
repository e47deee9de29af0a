"""
Subject Repository.

Data access for subjects, including live note counts.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.note import Note
from studynotes.models.subject import Subject
from studynotes.repositories.base import BaseRepository


class SubjectRepository(BaseRepository[Subject]):
    """Repository for Subject model."""

    model = Subject

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, subject_id: str, user_id: str) -> Subject | None:
        """Get a subject only if it belongs to the user."""
        result = await self.session.execute(
            select(Subject).where(Subject.id == subject_id, Subject.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def name_taken(
        self,
        user_id: str,
        name: str,
        exclude_id: str | None = None,
    ) -> bool:
        """Check the per-owner name uniqueness ahead of the constraint."""
        query = select(Subject.id).where(Subject.user_id == user_id, Subject.name == name)
        if exclude_id is not None:
            query = query.where(Subject.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_with_counts(self, user_id: str) -> list[tuple[Subject, int]]:
        """
        List the user's subjects ordered by name.

        Returns:
            (subject, notes_count) pairs, counts computed by one aggregate query
        """
        result = await self.session.execute(
            select(Subject, func.count(Note.id))
            .outerjoin(Note, Note.subject_id == Subject.id)
            .where(Subject.user_id == user_id)
            .group_by(Subject.id)
            .order_by(Subject.name)
        )
        return [(subject, count) for subject, count in result.all()]

    async def count_notes(self, subject_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Note).where(Note.subject_id == subject_id)
        )
        return result.scalar_one()
