"""
Subject Model.

A per-owner category for notes. Names are unique per owner.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from studynotes.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_SUBJECT_COLOR = "#3B82F6"


class Subject(UUIDMixin, TimestampMixin, Base):
    """A subject owned by a single user."""

    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("name", "user_id", name="uq_subjects_name_user_id"),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    color: Mapped[str] = mapped_column(
        String(7),
        default=DEFAULT_SUBJECT_COLOR,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Subject(id={self.id}, name={self.name!r})>"
