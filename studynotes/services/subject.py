"""
Subject Service.

Per-owner subjects with live note counts. Deleting a subject keeps its
notes; their subject reference is cleared by the database.
"""

import re
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from studynotes.core.exceptions import ConflictError, NotFoundError
from studynotes.models.note import Note
from studynotes.models.subject import DEFAULT_SUBJECT_COLOR, Subject
from studynotes.models.user import User
from studynotes.repositories.note import NoteRepository
from studynotes.repositories.subject import SubjectRepository
from studynotes.services.base import BaseService, FieldViolations

COLOR_PATTERN = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000

DUPLICATE_NAME_MESSAGE = "A subject with this name already exists"


def _check_fields(violations: FieldViolations, fields: dict[str, Any]) -> None:
    if "name" in fields:
        violations.check_length("name", fields["name"], min_length=1, max_length=NAME_MAX_LENGTH)
    if "description" in fields:
        violations.check_length("description", fields["description"], max_length=DESCRIPTION_MAX_LENGTH)
    if "color" in fields:
        color = fields["color"]
        if not isinstance(color, str) or not COLOR_PATTERN.match(color):
            violations.add("color", "Color must be a hex value like #3B82F6")


class SubjectService(BaseService):
    """Service for subject business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SubjectRepository(session)
        self.notes = NoteRepository(session)

    async def _get_owned(self, owner: User, subject_id: str) -> Subject:
        subject = await self.repo.get_owned(subject_id, owner.id)
        if subject is None:
            raise NotFoundError("Subject not found")
        return subject

    async def list_subjects(self, owner: User) -> list[tuple[Subject, int]]:
        """The owner's subjects by name, each with its live note count."""
        return await self.repo.list_with_counts(owner.id)

    async def get_subject(self, owner: User, subject_id: str) -> tuple[Subject, list[Note]]:
        """
        Get a subject with its notes, most recently updated first.

        Raises:
            NotFoundError: If the subject is missing or not the caller's
        """
        subject = await self._get_owned(owner, subject_id)
        notes = await self.notes.list_by_subject(subject.id)
        return subject, notes

    async def create_subject(
        self,
        owner: User,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Subject:
        """
        Create a subject.

        Raises:
            ValidationError: If a field is invalid
            ConflictError: If the owner already has a subject with this name
        """
        fields: dict[str, Any] = {"name": name, "description": description}
        if color is not None:
            fields["color"] = color
        violations = FieldViolations()
        _check_fields(violations, fields)
        violations.raise_if_any()

        name = name.strip()
        if await self.repo.name_taken(owner.id, name):
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

        self._log_operation("Creating subject", user_id=owner.id, name=name)
        return await self._execute_db_operation(
            "create_subject",
            self.repo.create(
                name=name,
                description=description,
                color=color or DEFAULT_SUBJECT_COLOR,
                user_id=owner.id,
            ),
            conflict_message=DUPLICATE_NAME_MESSAGE,
        )

    async def update_subject(
        self,
        owner: User,
        subject_id: str,
        patch: dict[str, Any],
    ) -> Subject:
        """
        Apply a partial update. Only keys present in the patch change.

        Raises:
            NotFoundError: If the subject is missing or not the caller's
            ValidationError: If a field is invalid
            ConflictError: If the new name is taken by another of the
                owner's subjects
        """
        subject = await self._get_owned(owner, subject_id)

        changes = {k: v for k, v in patch.items() if k in ("name", "description", "color")}
        violations = FieldViolations()
        _check_fields(violations, changes)
        violations.raise_if_any()

        if not changes:
            return subject

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if await self.repo.name_taken(owner.id, changes["name"], exclude_id=subject.id):
                raise ConflictError(DUPLICATE_NAME_MESSAGE)

        self._log_operation("Updating subject", subject_id=subject.id, fields=list(changes))
        return await self._execute_db_operation(
            "update_subject",
            self.repo.update(subject, **changes),
            conflict_message=DUPLICATE_NAME_MESSAGE,
        )

    async def delete_subject(self, owner: User, subject_id: str) -> None:
        """
        Delete a subject. Its notes remain, with no subject.

        Raises:
            NotFoundError: If the subject is missing or not the caller's
        """
        subject = await self._get_owned(owner, subject_id)

        self._log_operation("Deleting subject", subject_id=subject.id)
        await self._execute_db_operation("delete_subject", self.repo.delete(subject))

        # The database nulled the reference; mirror that on notes already loaded
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, Note) and obj.__dict__.get("subject_id") == subject.id:
                set_committed_value(obj, "subject_id", None)
                set_committed_value(obj, "subject", None)
