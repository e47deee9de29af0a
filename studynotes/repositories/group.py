"""
Group Repository.

Data access for groups, their rosters and the notes shared into them.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.models.group import Group, GroupMember, GroupNote
from studynotes.models.note import Note
from studynotes.repositories.base import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """Repository for Group model and its join tables."""

    model = Group

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_owned(self, user_id: str) -> list[Group]:
        result = await self.session.execute(
            select(Group).where(Group.owner_id == user_id).order_by(Group.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_joined(self, user_id: str) -> list[Group]:
        """Groups the user is enrolled in but does not own."""
        result = await self.session.execute(
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id, Group.owner_id != user_id)
            .order_by(Group.created_at.desc())
        )
        return list(result.scalars().all())

    async def group_ids_for_user(self, user_id: str) -> list[str]:
        """Every group the user owns or is enrolled in."""
        result = await self.session.execute(
            select(Group.id)
            .outerjoin(GroupMember, GroupMember.group_id == Group.id)
            .where(or_(Group.owner_id == user_id, GroupMember.user_id == user_id))
            .distinct()
        )
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    async def add_member(self, group_id: str, user_id: str, role: str) -> GroupMember:
        member = GroupMember(group_id=group_id, user_id=user_id, role=role)
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member

    # -------------------------------------------------------------------------
    # Shared notes
    # -------------------------------------------------------------------------

    async def get_share(self, group_id: str, note_id: str) -> GroupNote | None:
        result = await self.session.execute(
            select(GroupNote).where(
                GroupNote.group_id == group_id,
                GroupNote.note_id == note_id,
            )
        )
        return result.scalar_one_or_none()

    async def share_note(self, group_id: str, note_id: str) -> GroupNote:
        share = GroupNote(group_id=group_id, note_id=note_id)
        self.session.add(share)
        await self.session.flush()
        await self.session.refresh(share)
        return share

    async def unshare_note(self, share: GroupNote) -> None:
        await self.session.delete(share)
        await self.session.flush()

    async def list_shared_notes(self, group_id: str) -> list[Note]:
        """Notes shared into the group, most recently shared first."""
        result = await self.session.execute(
            select(Note)
            .join(GroupNote, GroupNote.note_id == Note.id)
            .where(GroupNote.group_id == group_id)
            .order_by(GroupNote.created_at.desc())
        )
        return list(result.scalars().all())
