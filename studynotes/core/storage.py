"""
Attachment File Storage.

Durable byte store for uploaded attachments, plus the glue that keeps the
filesystem consistent with the database transaction.

A file write cannot join a database transaction, so file side effects are
registered on the session and settled by SQLAlchemy session events:

    upload:  written before the row is inserted. Kept once the session
             commits, deleted if its transaction ends any other way
             (rollback, or the session closing without a commit).
    delete:  the file is renamed aside ("staged") before the row is deleted.
             Purged once the session commits, renamed back otherwise.

At rest there is never a row without its file or a file without its row.

Usage:
    storage = FileStorage(get_upload_dir())
    stored = await storage.save(data, "lecture.pdf")
    track_upload(session, stored.path)
"""

import asyncio
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session

from studynotes.core.concurrency import run_blocking
from studynotes.core.exceptions import StorageError
from studynotes.core.logging import get_logger

logger = get_logger(__name__)

_PENDING_UPLOADS = "studynotes.pending_uploads"
_STAGED_DELETES = "studynotes.staged_deletes"
_STAGED_SUFFIX = ".deleting"
_PARTIAL_SUFFIX = ".part"


@dataclass(frozen=True)
class StoredFile:
    """A file persisted under a generated name."""

    filename: str
    path: Path
    size: int


class FileStorage:
    """Path-based write/read/delete over a single upload directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @staticmethod
    def generate_name(original_name: str) -> str:
        """Collision-resistant stored name. Only the extension is kept."""
        return f"{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"

    def _write(self, path: Path, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(path.name + _PARTIAL_SUFFIX)
        try:
            with open(partial, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(partial, path)
        finally:
            partial.unlink(missing_ok=True)

    async def save(self, data: bytes, original_name: str) -> StoredFile:
        """
        Persist bytes under a generated name.

        Bytes land in a partial file first, so an interrupted write never
        leaves a file under the final name.

        Raises:
            StorageError: If the bytes could not be written
        """
        filename = self.generate_name(original_name)
        path = self.root / filename
        write = asyncio.ensure_future(run_blocking(self._write, path, data))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            # The thread keeps writing after cancellation; remove what it leaves.
            write.add_done_callback(lambda _: _unlink(path))
            raise
        except OSError as e:
            logger.error(
                "Attachment write failed",
                extra={"path": str(path), "error": str(e)},
            )
            raise StorageError("Could not store uploaded file") from e

        logger.debug("Attachment written", extra={"path": str(path), "size": len(data)})
        return StoredFile(filename=filename, path=path, size=len(data))

    def exists(self, path: str | Path) -> bool:
        return Path(path).is_file()

    async def discard(self, path: str | Path) -> None:
        """
        Best-effort delete used for compensation.

        Failures are logged and never raised, so the error that triggered
        the cleanup is the one the caller sees.
        """
        try:
            await run_blocking(_unlink, Path(path))
        except OSError as e:
            logger.warning(
                "Orphaned attachment file could not be removed",
                extra={"path": str(path), "error": str(e)},
            )

    async def stage_delete(self, path: str | Path) -> Path | None:
        """
        Move a file aside ahead of deleting its row.

        Returns:
            The staged path, or None if the file was already missing

        Raises:
            StorageError: If the file exists but could not be moved
        """
        original = Path(path)
        staged = original.with_name(original.name + _STAGED_SUFFIX)
        try:
            await run_blocking(os.replace, original, staged)
        except FileNotFoundError:
            logger.warning("Attachment file already missing", extra={"path": str(original)})
            return None
        except OSError as e:
            logger.error(
                "Attachment file could not be removed",
                extra={"path": str(original), "error": str(e)},
            )
            raise StorageError("Could not delete attachment file, try again") from e
        return staged


def _unlink(path: Path) -> None:
    path.unlink(missing_ok=True)


# =============================================================================
# Session Bookkeeping
# =============================================================================


def track_upload(session: Any, path: Path) -> None:
    """Delete the file unless the session commits."""
    session.info.setdefault(_PENDING_UPLOADS, []).append(Path(path))


def track_staged_delete(session: Any, original: Path, staged: Path) -> None:
    """Purge the staged file on commit, restore it otherwise."""
    session.info.setdefault(_STAGED_DELETES, []).append((Path(original), Path(staged)))


async def stage_files_for_delete(
    session: Any,
    storage: FileStorage,
    paths: list[str],
) -> None:
    """
    Stage every file ahead of a cascading delete.

    If one file cannot be moved, the ones already staged are moved back
    before the error propagates, so nothing changes.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for path in paths:
            moved = await storage.stage_delete(path)
            if moved is not None:
                staged.append((Path(path), moved))
    except StorageError:
        for original, moved in staged:
            _restore(original, moved)
        raise

    for original, moved in staged:
        track_staged_delete(session, original, moved)


def _restore(original: Path, staged: Path) -> None:
    try:
        os.replace(staged, original)
    except OSError as e:
        logger.error(
            "Staged attachment could not be restored",
            extra={"path": str(original), "error": str(e)},
        )


@event.listens_for(Session, "after_commit")
def _settle_files_on_commit(session: Session) -> None:
    session.info.pop(_PENDING_UPLOADS, None)
    for original, staged in session.info.pop(_STAGED_DELETES, []):
        try:
            staged.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                "Staged attachment could not be purged",
                extra={"path": str(staged), "error": str(e)},
            )


@event.listens_for(Session, "after_transaction_end")
def _settle_files_without_commit(session: Session, transaction: Any) -> None:
    # Runs for rollback and for close without commit. A commit has already
    # popped both keys in after_commit, so anything left here was not kept.
    if transaction.parent is not None:
        return
    for path in session.info.pop(_PENDING_UPLOADS, []):
        try:
            path.unlink(missing_ok=True)
            logger.debug("Rolled back attachment write", extra={"path": str(path)})
        except OSError as e:
            logger.warning(
                "Orphaned attachment file could not be removed",
                extra={"path": str(path), "error": str(e)},
            )
    for original, staged in session.info.pop(_STAGED_DELETES, []):
        _restore(original, staged)
