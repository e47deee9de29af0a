"""
Tag Repository.

Data access for tags, including live note counts.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.tag import Tag, note_tags
from studynotes.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag model."""

    model = Tag

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, tag_id: str, user_id: str) -> Tag | None:
        result = await self.session.execute(
            select(Tag).where(Tag.id == tag_id, Tag.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_owned_many(self, tag_ids: Iterable[str], user_id: str) -> list[Tag]:
        """Resolve ids to tags, keeping only those the user owns."""
        ids = list(dict.fromkeys(tag_ids))
        if not ids:
            return []
        result = await self.session.execute(
            select(Tag).where(Tag.id.in_(ids), Tag.user_id == user_id)
        )
        return list(result.scalars().all())

    async def list_with_counts(self, user_id: str) -> list[tuple[Tag, int]]:
        """List the user's tags ordered by name, with live note counts."""
        result = await self.session.execute(
            select(Tag, func.count(note_tags.c.note_id))
            .outerjoin(note_tags, note_tags.c.tag_id == Tag.id)
            .where(Tag.user_id == user_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(tag, count) for tag, count in result.all()]
