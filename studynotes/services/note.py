"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements the read/write access rules.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.config import get_upload_dir
from studynotes.core.exceptions import AuthorizationError, NotFoundError
from studynotes.core.permissions import can_read_note, owns_resource
from studynotes.core.storage import FileStorage, stage_files_for_delete
from studynotes.core.utils import utc_now
from studynotes.models.note import Note
from studynotes.models.subject import Subject
from studynotes.models.tag import Tag
from studynotes.models.user import User
from studynotes.repositories.group import GroupRepository
from studynotes.repositories.note import NoteRepository
from studynotes.repositories.subject import SubjectRepository
from studynotes.repositories.tag import TagRepository
from studynotes.services.base import BaseService, FieldViolations

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 100_000

UPDATABLE_FIELDS = ("title", "content", "is_public", "subject_id", "tag_ids")


def _check_fields(violations: FieldViolations, fields: dict[str, Any]) -> None:
    if "title" in fields:
        violations.check_length("title", fields["title"], min_length=1, max_length=TITLE_MAX_LENGTH)
    if "content" in fields:
        violations.check_length("content", fields["content"], max_length=CONTENT_MAX_LENGTH)
    if "is_public" in fields and not isinstance(fields["is_public"], bool):
        violations.add("is_public", "Must be true or false")
    if "tag_ids" in fields and fields["tag_ids"] is None:
        violations.add("tag_ids", "Must be a list, use [] to clear tags")


class NoteService(BaseService):
    """
    Service for note business logic.

    Notes are private to their owner unless public or shared into a group
    the reader belongs to. Only the owner may modify or delete a note.
    """

    def __init__(self, session: AsyncSession, storage: FileStorage | None = None) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.subjects = SubjectRepository(session)
        self.tags = TagRepository(session)
        self.groups = GroupRepository(session)
        self.storage = storage or FileStorage(get_upload_dir())

    # -------------------------------------------------------------------------
    # Access helpers
    # -------------------------------------------------------------------------

    async def _is_readable(self, user: User, note: Note) -> bool:
        if owns_resource(user, note) or note.is_public:
            return True
        return can_read_note(
            user,
            note,
            shared_group_ids=await self.repo.shared_group_ids(note.id),
            member_group_ids=await self.groups.group_ids_for_user(user.id),
        )

    async def _get_readable(self, user: User, note_id: str) -> Note:
        note = await self.repo.get_by_id_or_none(note_id)
        if note is None or not await self._is_readable(user, note):
            raise NotFoundError("Note not found")
        return note

    async def _get_writable(self, user: User, note_id: str) -> Note:
        """
        Load a note the user may modify.

        Raises:
            NotFoundError: If the note is missing or invisible to the user
            AuthorizationError: If the user can read but does not own it
        """
        note = await self._get_readable(user, note_id)
        if not owns_resource(user, note):
            raise AuthorizationError("Only the note owner can modify this note")
        return note

    async def _resolve_subject(self, owner: User, subject_id: str) -> Subject:
        subject = await self.subjects.get_owned(subject_id, owner.id)
        if subject is None:
            raise NotFoundError("Subject not found")
        return subject

    async def _resolve_tags(self, owner: User, tag_ids: list[str]) -> list[Tag]:
        """Keep only the caller's tags. Others are dropped, never an error."""
        tags = await self.tags.get_owned_many(tag_ids, owner.id)
        dropped = len(set(tag_ids)) - len(tags)
        if dropped:
            self._log_debug("Dropped tags not owned by caller", user_id=owner.id, dropped=dropped)
        return tags

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create_note(
        self,
        owner: User,
        title: str,
        content: str | None = None,
        subject_id: str | None = None,
        tag_ids: list[str] | None = None,
        is_public: bool = False,
    ) -> Note:
        """
        Create a new note.

        Args:
            owner: The caller, who owns the note
            title: Note title
            content: Optional body
            subject_id: One of the owner's subjects
            tag_ids: Tags to attach; ids the owner does not own are dropped
            is_public: Whether any user may read the note

        Returns:
            Created note

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If the subject is not the owner's
        """
        violations = FieldViolations()
        _check_fields(violations, {"title": title, "content": content, "is_public": is_public})
        violations.raise_if_any()

        subject = await self._resolve_subject(owner, subject_id) if subject_id else None
        tags = await self._resolve_tags(owner, tag_ids) if tag_ids else []

        self._log_operation("Creating note", user_id=owner.id, title=title)
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=title.strip(),
                content=content,
                is_public=is_public,
                user_id=owner.id,
                subject=subject,
                tags=tags,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, user: User, note_id: str) -> Note:
        """
        Get a note the user may read.

        Raises:
            NotFoundError: If the note is missing or not readable by the user
        """
        return await self._get_readable(user, note_id)

    async def list_notes(
        self,
        owner: User,
        subject_id: str | None = None,
        tag_id: str | None = None,
        search: str | None = None,
        is_public: bool | None = None,
    ) -> list[Note]:
        """The owner's notes, most recently updated first. Filters combine."""
        return await self.repo.list_for_owner(
            owner.id,
            subject_id=subject_id,
            tag_id=tag_id,
            search=search,
            is_public=is_public,
        )

    async def update_note(self, owner: User, note_id: str, patch: dict[str, Any]) -> Note:
        """
        Update an existing note.

        Only keys present in the patch change. A present tag_ids replaces
        the tag set, even when empty. A present subject_id of None clears
        the subject.

        Raises:
            NotFoundError: If the note is invisible, or the subject not owned
            AuthorizationError: If the caller can read but does not own the note
            ValidationError: If a field is invalid
        """
        note = await self._get_writable(owner, note_id)

        changes = {k: v for k, v in patch.items() if k in UPDATABLE_FIELDS}
        violations = FieldViolations()
        _check_fields(violations, changes)
        violations.raise_if_any()

        if not changes:
            return note

        self._log_operation("Updating note", note_id=note.id, fields=list(changes))

        if "subject_id" in changes:
            subject_id = changes.pop("subject_id")
            note.subject = await self._resolve_subject(owner, subject_id) if subject_id else None
        if "tag_ids" in changes:
            note.tags = await self._resolve_tags(owner, changes.pop("tag_ids"))
        if "title" in changes:
            changes["title"] = changes["title"].strip()

        return await self._execute_db_operation(
            "update_note",
            self.repo.update(note, updated_at=utc_now(), **changes),
        )

    async def delete_note(self, owner: User, note_id: str) -> None:
        """
        Delete a note with its attachments.

        Attachment files are staged first and purged when the transaction
        commits. Tag and group links are removed by the database.

        Raises:
            NotFoundError: If the note is invisible to the caller
            AuthorizationError: If the caller can read but does not own the note
            StorageError: If an attachment file could not be staged
        """
        note = await self._get_writable(owner, note_id)

        paths = await self.repo.attachment_paths(note.id)
        if paths:
            await stage_files_for_delete(self.session, self.storage, paths)

        self._log_operation("Deleting note", note_id=note.id, attachments=len(paths))
        await self._execute_db_operation("delete_note", self.repo.delete(note))
