"""
Attachment Service.

Binds uploaded bytes to a note. The bytes are written first, then the row
is inserted; the write is undone if anything after it fails, and again if
the request's transaction rolls back instead of committing.

    Received  -- row committed -->  Linked
    Received  -- any failure   -->  RolledBack (bytes deleted, no row)
"""

import asyncio
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.config import get_app_config, get_upload_dir
from studynotes.core.exceptions import NotFoundError
from studynotes.core.storage import FileStorage, track_staged_delete, track_upload
from studynotes.models.attachment import Attachment
from studynotes.models.user import User
from studynotes.repositories.attachment import AttachmentRepository
from studynotes.repositories.note import NoteRepository
from studynotes.services.base import BaseService, FieldViolations

ALLOWED_EXTENSIONS = frozenset({
    ".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx", ".txt", ".zip",
})

ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/zip",
    "application/x-zip-compressed",
})


def validate_upload(original_name: str, mime_type: str, size: int) -> str:
    """
    Reject uploads by size and type before any byte is written.

    Both the extension and the declared MIME type must be allowed.

    Returns:
        The normalized media type

    Raises:
        ValidationError: With one entry per violated rule
    """
    max_bytes = get_app_config().storage.max_upload_bytes
    violations = FieldViolations()

    if size > max_bytes:
        violations.add("file", f"File exceeds the {max_bytes // (1024 * 1024)} MiB limit")
    if size <= 0:
        violations.add("file", "File is empty")

    extension = Path(original_name or "").suffix.lower()
    media_type = (mime_type or "").split(";")[0].strip().lower()
    if extension not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_MIME_TYPES:
        violations.add(
            "file",
            "Unsupported file type. Allowed: images, PDF, Word documents, text and zip",
        )

    violations.raise_if_any("Upload rejected")
    return media_type


class AttachmentService(BaseService):
    """Service for the attachment lifecycle."""

    def __init__(self, session: AsyncSession, storage: FileStorage | None = None) -> None:
        super().__init__(session)
        self.repo = AttachmentRepository(session)
        self.notes = NoteRepository(session)
        self.storage = storage or FileStorage(get_upload_dir())

    async def attach(
        self,
        user: User,
        note_id: str,
        data: bytes,
        original_name: str,
        mime_type: str,
    ) -> Attachment:
        """
        Store a file and bind it to one of the user's notes.

        Args:
            user: The uploader, who must own the note
            note_id: Target note
            data: File bytes
            original_name: Client-supplied name, kept for display only
            mime_type: Client-declared content type

        Returns:
            The attachment row, flushed but not committed

        Raises:
            ValidationError: If size or type is not allowed; nothing is written
            NotFoundError: If the note is missing or not the user's
            StorageError: If the bytes could not be written
        """
        media_type = validate_upload(original_name, mime_type, len(data))

        stored = await self.storage.save(data, original_name)
        try:
            note = await self.notes.get_owned(note_id, user.id)
            if note is None:
                raise NotFoundError("Note not found")

            attachment = await self._execute_db_operation(
                "create_attachment",
                self.repo.create(
                    filename=stored.filename,
                    original_name=Path(original_name).name[:255],
                    mime_type=media_type,
                    size=stored.size,
                    path=str(stored.path),
                    note_id=note.id,
                    user_id=user.id,
                ),
            )
        except (Exception, asyncio.CancelledError):
            await asyncio.shield(self.storage.discard(stored.path))
            raise

        # From here the session owns the file: kept on commit, deleted otherwise
        track_upload(self.session, stored.path)
        self._log_operation(
            "Attachment stored",
            attachment_id=attachment.id,
            note_id=note.id,
            size=stored.size,
        )
        return attachment

    async def fetch(self, user: User, attachment_id: str) -> tuple[Attachment, Path]:
        """
        Resolve an attachment for download.

        Returns:
            The row and the path of its bytes

        Raises:
            NotFoundError: If missing, not on one of the user's notes, or
                the bytes are gone
        """
        attachment = await self.repo.get_for_note_owner(attachment_id, user.id)
        if attachment is None:
            raise NotFoundError("Attachment not found")

        path = Path(attachment.path)
        if not self.storage.exists(path):
            self._logger.error(
                "Attachment file missing",
                extra={"attachment_id": attachment.id, "path": str(path)},
            )
            raise NotFoundError("Attachment file not found")
        return attachment, path

    async def remove(self, user: User, attachment_id: str) -> None:
        """
        Delete an attachment row and its file.

        The file is moved aside first, so a failure leaves both in place.
        The staged file is purged on commit and moved back if the session ends without one.

        Raises:
            NotFoundError: If missing or not on one of the user's notes
            StorageError: If the file could not be moved aside
        """
        attachment = await self.repo.get_for_note_owner(attachment_id, user.id)
        if attachment is None:
            raise NotFoundError("Attachment not found")

        original = Path(attachment.path)
        staged = await self.storage.stage_delete(original)
        if staged is not None:
            track_staged_delete(self.session, original, staged)

        self._log_operation("Removing attachment", attachment_id=attachment.id)
        await self._execute_db_operation("delete_attachment", self.repo.delete(attachment))
