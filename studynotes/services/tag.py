"""
Tag Service.

Per-owner tags with live note counts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from studynotes.core.exceptions import NotFoundError
from studynotes.models.note import Note
from studynotes.models.tag import Tag
from studynotes.models.user import User
from studynotes.repositories.tag import TagRepository
from studynotes.services.base import BaseService, FieldViolations

NAME_MAX_LENGTH = 50


class TagService(BaseService):
    """Service for tag business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TagRepository(session)

    async def list_tags(self, owner: User) -> list[tuple[Tag, int]]:
        return await self.repo.list_with_counts(owner.id)

    async def create_tag(self, owner: User, name: str) -> Tag:
        """
        Create a tag.

        Raises:
            ValidationError: If the name is empty or too long
        """
        violations = FieldViolations()
        violations.check_length("name", name, min_length=1, max_length=NAME_MAX_LENGTH)
        violations.raise_if_any()

        self._log_operation("Creating tag", user_id=owner.id, name=name.strip())
        return await self._execute_db_operation(
            "create_tag",
            self.repo.create(name=name.strip(), user_id=owner.id),
        )

    async def delete_tag(self, owner: User, tag_id: str) -> None:
        """
        Delete a tag. Notes lose the tag and are otherwise unchanged.

        Raises:
            NotFoundError: If the tag is missing or not the caller's
        """
        tag = await self.repo.get_owned(tag_id, owner.id)
        if tag is None:
            raise NotFoundError("Tag not found")

        self._log_operation("Deleting tag", tag_id=tag.id)
        await self._execute_db_operation("delete_tag", self.repo.delete(tag))

        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, Note) and "tags" in obj.__dict__:
                set_committed_value(obj, "tags", [t for t in obj.tags if t.id != tag_id])
