"""
Database models.

Importing this package registers every table on Base.metadata.
"""

from studynotes.models.attachment import Attachment
from studynotes.models.base import Base
from studynotes.models.group import Group, GroupMember, GroupNote, GroupRole
from studynotes.models.note import Note
from studynotes.models.subject import Subject
from studynotes.models.tag import Tag, note_tags
from studynotes.models.user import User

__all__ = [
    "Attachment",
    "Base",
    "Group",
    "GroupMember",
    "GroupNote",
    "GroupRole",
    "Note",
    "Subject",
    "Tag",
    "User",
    "note_tags",
]
