"""
Group Models.

A group has one owner, a roster of members with roles, and a set of notes
shared into it. Membership and sharing rows use composite primary keys, so
a user cannot be enrolled twice and a note cannot be shared twice.
"""

from enum import StrEnum

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studynotes.models.base import Base, TimestampMixin, UUIDMixin
from studynotes.models.note import Note
from studynotes.models.user import User


class GroupRole(StrEnum):
    MEMBER = "member"
    ADMIN = "admin"


class GroupMember(TimestampMixin, Base):
    """Roster entry."""

    __tablename__ = "group_members"

    group_id: Mapped[str] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        default=GroupRole.MEMBER.value,
        nullable=False,
    )

    user: Mapped[User] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<GroupMember(group_id={self.group_id}, user_id={self.user_id}, role={self.role!r})>"


class GroupNote(TimestampMixin, Base):
    """A note shared into a group."""

    __tablename__ = "group_notes"

    group_id: Mapped[str] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    note: Mapped[Note] = relationship(lazy="selectin")


class Group(UUIDMixin, TimestampMixin, Base):
    """A study group."""

    __tablename__ = "groups"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_private: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    members: Mapped[list[GroupMember]] = relationship(
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=GroupMember.created_at,
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name!r})>"
