"""
Group Service.

Groups, their rosters and note sharing. The owner manages the group and is
enrolled as an admin on creation. Members read the notes shared into it.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from studynotes.core.permissions import (
    can_manage_group,
    can_remove_member,
    can_see_group,
    is_group_member,
    owns_resource,
)
from studynotes.models.group import Group, GroupMember, GroupNote, GroupRole
from studynotes.models.note import Note
from studynotes.models.user import User
from studynotes.repositories.group import GroupRepository
from studynotes.repositories.note import NoteRepository
from studynotes.repositories.user import UserRepository
from studynotes.services.base import BaseService, FieldViolations

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000

ROLES = tuple(role.value for role in GroupRole)


def _check_fields(violations: FieldViolations, fields: dict[str, Any]) -> None:
    if "name" in fields:
        violations.check_length("name", fields["name"], min_length=1, max_length=NAME_MAX_LENGTH)
    if "description" in fields:
        violations.check_length("description", fields["description"], max_length=DESCRIPTION_MAX_LENGTH)
    if "is_private" in fields and not isinstance(fields["is_private"], bool):
        violations.add("is_private", "Must be true or false")


def _member_ids(group: Group) -> list[str]:
    return [member.user_id for member in group.members]


class GroupService(BaseService):
    """Service for group business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = GroupRepository(session)
        self.users = UserRepository(session)
        self.notes = NoteRepository(session)

    # -------------------------------------------------------------------------
    # Access helpers
    # -------------------------------------------------------------------------

    async def _get_visible(self, user: User, group_id: str) -> Group:
        """Private groups are reported missing to outsiders."""
        group = await self.repo.get_by_id_or_none(group_id)
        if group is None or not can_see_group(user, group, _member_ids(group)):
            raise NotFoundError("Group not found")
        return group

    async def _get_for_member(self, user: User, group_id: str) -> Group:
        group = await self._get_visible(user, group_id)
        if not is_group_member(user, group, _member_ids(group)):
            raise AuthorizationError("Only group members can view this group")
        return group

    async def _get_managed(self, user: User, group_id: str) -> Group:
        group = await self._get_visible(user, group_id)
        if not can_manage_group(user, group):
            raise AuthorizationError("Only the group owner can manage this group")
        return group

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    async def create_group(
        self,
        owner: User,
        name: str,
        description: str | None = None,
        is_private: bool = False,
    ) -> Group:
        """
        Create a group and enroll the owner as its admin.

        Raises:
            ValidationError: If a field is invalid
        """
        violations = FieldViolations()
        _check_fields(
            violations,
            {"name": name, "description": description, "is_private": is_private},
        )
        violations.raise_if_any()

        self._log_operation("Creating group", owner_id=owner.id, name=name)
        group = await self._execute_db_operation(
            "create_group",
            self.repo.create(
                name=name.strip(),
                description=description,
                is_private=is_private,
                owner_id=owner.id,
                members=[GroupMember(user_id=owner.id, role=GroupRole.ADMIN.value)],
            ),
        )
        self._log_debug("Group created", group_id=group.id)
        return group

    async def list_groups(self, user: User) -> dict[str, list[Group]]:
        """Groups the user owns, and groups the user only belongs to."""
        return {
            "owned": await self.repo.list_owned(user.id),
            "member": await self.repo.list_joined(user.id),
        }

    async def get_group(self, user: User, group_id: str) -> tuple[Group, list[Note]]:
        """
        Get a group with its roster and shared notes.

        Raises:
            NotFoundError: If the group is missing or private to outsiders
            AuthorizationError: If the user is not a member
        """
        group = await self._get_for_member(user, group_id)
        notes = await self.repo.list_shared_notes(group.id)
        return group, notes

    async def update_group(self, user: User, group_id: str, patch: dict[str, Any]) -> Group:
        """
        Rename, redescribe or change privacy. Owner only.

        Raises:
            NotFoundError: If the group is invisible to the user
            AuthorizationError: If the user is not the owner
            ValidationError: If a field is invalid
        """
        group = await self._get_managed(user, group_id)

        changes = {k: v for k, v in patch.items() if k in ("name", "description", "is_private")}
        violations = FieldViolations()
        _check_fields(violations, changes)
        violations.raise_if_any()

        if not changes:
            return group
        if "name" in changes:
            changes["name"] = changes["name"].strip()

        self._log_operation("Updating group", group_id=group.id, fields=list(changes))
        return await self._execute_db_operation(
            "update_group",
            self.repo.update(group, **changes),
        )

    async def delete_group(self, user: User, group_id: str) -> None:
        """
        Delete a group. Membership and sharing links go with it; notes stay.

        Raises:
            NotFoundError: If the group is invisible to the user
            AuthorizationError: If the user is not the owner
        """
        group = await self._get_managed(user, group_id)
        self._log_operation("Deleting group", group_id=group.id)
        await self._execute_db_operation("delete_group", self.repo.delete(group))

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    async def add_member(
        self,
        actor: User,
        group_id: str,
        user_id: str,
        role: str = GroupRole.MEMBER.value,
    ) -> GroupMember:
        """
        Enroll a user. Owner only.

        Raises:
            NotFoundError: If the group is invisible or the user does not exist
            AuthorizationError: If the actor is not the owner
            ValidationError: If the role is unknown
            ConflictError: If the user is already a member
        """
        group = await self._get_managed(actor, group_id)

        if role not in ROLES:
            raise ValidationError(
                "Invalid member role",
                details={"fields": [{"field": "role", "message": f"Must be one of: {', '.join(ROLES)}"}]},
            )
        if not await self.users.exists(user_id):
            raise NotFoundError("User not found")
        if user_id in _member_ids(group):
            raise ConflictError("User is already a member of this group")

        self._log_operation("Adding group member", group_id=group.id, user_id=user_id, role=role)
        member = await self._execute_db_operation(
            "add_member",
            self.repo.add_member(group.id, user_id, role),
            conflict_message="User is already a member of this group",
        )
        await self.session.refresh(group, attribute_names=["members"])
        return member

    async def remove_member(self, actor: User, group_id: str, user_id: str) -> None:
        """
        Remove a member. The owner removes anyone else; members only themselves.

        Raises:
            NotFoundError: If the group is invisible or the user not enrolled
            AuthorizationError: If the actor may not remove this member
            ValidationError: If the owner's own membership is targeted
        """
        group = await self._get_visible(actor, group_id)

        if not can_remove_member(actor, group, user_id):
            if not is_group_member(actor, group, _member_ids(group)):
                raise AuthorizationError("Only group members can change this group")
            raise AuthorizationError("Members can only remove themselves")
        if user_id == group.owner_id:
            raise ValidationError(
                "The group owner cannot leave the group",
                details={"fields": [{"field": "user_id", "message": "Owner membership is permanent"}]},
            )

        member = next((m for m in group.members if m.user_id == user_id), None)
        if member is None:
            raise NotFoundError("Member not found")

        self._log_operation("Removing group member", group_id=group.id, user_id=user_id)
        group.members.remove(member)
        await self._execute_db_operation("remove_member", self.session.flush())

    # -------------------------------------------------------------------------
    # Shared notes
    # -------------------------------------------------------------------------

    async def share_note(self, actor: User, group_id: str, note_id: str) -> GroupNote:
        """
        Share one of the actor's notes into a group the actor belongs to.

        Raises:
            NotFoundError: If the group is invisible or the note not the actor's
            AuthorizationError: If the actor is not a member of the group
            ConflictError: If the note is already shared into the group
        """
        group = await self._get_for_member(actor, group_id)

        note = await self.notes.get_by_id_or_none(note_id)
        if note is None or not owns_resource(actor, note):
            raise NotFoundError("Note not found")
        if await self.repo.get_share(group.id, note.id) is not None:
            raise ConflictError("Note is already shared with this group")

        self._log_operation("Sharing note", group_id=group.id, note_id=note.id)
        return await self._execute_db_operation(
            "share_note",
            self.repo.share_note(group.id, note.id),
            conflict_message="Note is already shared with this group",
        )

    async def unshare_note(self, actor: User, group_id: str, note_id: str) -> None:
        """
        Stop sharing a note. Allowed for the note's owner and the group owner.

        Raises:
            NotFoundError: If the group is invisible or the note not shared
            AuthorizationError: If the actor is neither owner
        """
        group = await self._get_visible(actor, group_id)

        share = await self.repo.get_share(group.id, note_id)
        if share is None:
            raise NotFoundError("Shared note not found")
        if not (owns_resource(actor, share.note) or can_manage_group(actor, group)):
            raise AuthorizationError("Only the note owner or group owner can unshare this note")

        self._log_operation("Unsharing note", group_id=group.id, note_id=note_id)
        await self._execute_db_operation(
            "unshare_note",
            self.repo.unshare_note(share),
        )

    async def list_group_notes(self, actor: User, group_id: str) -> list[Note]:
        """
        Notes shared into a group. Members only.

        Raises:
            NotFoundError: If the group is invisible to the actor
            AuthorizationError: If the actor is not a member
        """
        group = await self._get_for_member(actor, group_id)
        return await self.repo.list_shared_notes(group.id)
