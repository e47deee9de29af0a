"""
Note Model.

The central entity. A note belongs to one owner, optionally to one of the
owner's subjects, carries any number of the owner's tags, and owns its
attachments.
"""

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studynotes.models.attachment import Attachment
from studynotes.models.base import Base, TimestampMixin, UUIDMixin
from studynotes.models.subject import Subject
from studynotes.models.tag import Tag, note_tags


class Note(UUIDMixin, TimestampMixin, Base):
    """A user's note."""

    __tablename__ = "notes"
    __table_args__ = (Index("ix_notes_created_at", "created_at"),)

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_public: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[str | None] = mapped_column(
        ForeignKey("subjects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Async sessions cannot lazy load, so everything a response needs is
    # loaded eagerly.
    subject: Mapped[Subject | None] = relationship(lazy="selectin")
    tags: Mapped[list[Tag]] = relationship(
        secondary=note_tags,
        lazy="selectin",
        order_by=Tag.name,
        passive_deletes=True,
    )
    attachments: Mapped[list[Attachment]] = relationship(
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=Attachment.created_at,
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
