"""
Integration Tests for GroupService.

Roster management, note sharing and the disclosure rules for private groups.
"""

import pytest

from studynotes.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from studynotes.services.group import GroupService
from studynotes.services.note import NoteService


@pytest.fixture
def groups(db_session):
    return GroupService(db_session)


@pytest.fixture
def notes(db_session, storage):
    return NoteService(db_session, storage)


class TestCreateGroup:

    async def test_owner_is_enrolled_as_admin(self, groups, make_user):
        owner = await make_user()

        group = await groups.create_group(owner, "Study Group", description="Calculus")

        assert group.owner_id == owner.id
        assert [(m.user_id, m.role) for m in group.members] == [(owner.id, "admin")]

    async def test_blank_name_is_rejected(self, groups, make_user):
        owner = await make_user()

        with pytest.raises(ValidationError):
            await groups.create_group(owner, " ")

    async def test_list_splits_owned_and_joined(self, groups, make_user):
        owner = await make_user()
        member = await make_user()
        mine = await groups.create_group(owner, "Mine")
        theirs = await groups.create_group(member, "Theirs")
        await groups.add_member(member, theirs.id, owner.id)

        listed = await groups.list_groups(owner)

        assert [g.id for g in listed["owned"]] == [mine.id]
        assert [g.id for g in listed["member"]] == [theirs.id]


class TestAccess:

    async def test_private_group_is_not_found_for_outsiders(self, groups, make_user):
        owner = await make_user()
        outsider = await make_user()
        group = await groups.create_group(owner, "Secret", is_private=True)

        with pytest.raises(NotFoundError):
            await groups.get_group(outsider, group.id)

    async def test_public_group_is_forbidden_for_outsiders(self, groups, make_user):
        owner = await make_user()
        outsider = await make_user()
        group = await groups.create_group(owner, "Open")

        with pytest.raises(AuthorizationError):
            await groups.get_group(outsider, group.id)

    async def test_only_owner_updates_and_deletes(self, groups, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)

        with pytest.raises(AuthorizationError):
            await groups.update_group(member, group.id, {"name": "Hijacked"})
        with pytest.raises(AuthorizationError):
            await groups.delete_group(member, group.id)

        updated = await groups.update_group(owner, group.id, {"is_private": True})
        assert updated.is_private is True


class TestRoster:

    async def test_add_member(self, groups, make_user):
        owner = await make_user()
        member = await make_user(name="Ioana")
        group = await groups.create_group(owner, "Study Group")

        enrolled = await groups.add_member(owner, group.id, member.id)

        assert enrolled.role == "member"
        assert enrolled.user.name == "Ioana"
        assert {m.user_id for m in group.members} == {owner.id, member.id}

    async def test_add_twice_conflicts(self, groups, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)

        with pytest.raises(ConflictError):
            await groups.add_member(owner, group.id, member.id)

    async def test_add_unknown_user_is_not_found(self, groups, make_user):
        owner = await make_user()
        group = await groups.create_group(owner, "Study Group")

        with pytest.raises(NotFoundError, match="User not found"):
            await groups.add_member(owner, group.id, "no-such-user")

    async def test_add_with_unknown_role_is_rejected(self, groups, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")

        with pytest.raises(ValidationError):
            await groups.add_member(owner, group.id, member.id, role="moderator")

    async def test_member_leaves(self, groups, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)

        await groups.remove_member(member, group.id, member.id)

        assert [m.user_id for m in group.members] == [owner.id]

    async def test_member_cannot_remove_others(self, groups, make_user):
        owner = await make_user()
        first = await make_user()
        second = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, first.id)
        await groups.add_member(owner, group.id, second.id)

        with pytest.raises(AuthorizationError):
            await groups.remove_member(first, group.id, second.id)

    async def test_owner_cannot_leave(self, groups, make_user):
        owner = await make_user()
        group = await groups.create_group(owner, "Study Group")

        with pytest.raises(ValidationError):
            await groups.remove_member(owner, group.id, owner.id)

    async def test_removing_non_member_is_not_found(self, groups, make_user):
        owner = await make_user()
        stranger = await make_user()
        group = await groups.create_group(owner, "Study Group")

        with pytest.raises(NotFoundError):
            await groups.remove_member(owner, group.id, stranger.id)

    async def test_owner_removal_revokes_access(self, groups, notes, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)
        note = await notes.create_note(owner, "Lecture 1")
        await groups.share_note(owner, group.id, note.id)
        assert (await notes.get_note(member, note.id)).id == note.id

        await groups.remove_member(owner, group.id, member.id)

        assert [m.user_id for m in group.members] == [owner.id]
        with pytest.raises(AuthorizationError):
            await groups.list_group_notes(member, group.id)
        with pytest.raises(NotFoundError):
            await notes.get_note(member, note.id)


class TestSharing:

    async def test_share_and_list(self, groups, notes, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)
        note = await notes.create_note(member, "Lecture 1")

        share = await groups.share_note(member, group.id, note.id)
        shared = await groups.list_group_notes(owner, group.id)

        assert share.note_id == note.id
        assert [n.id for n in shared] == [note.id]

    async def test_cannot_share_someone_elses_note(self, groups, notes, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)
        note = await notes.create_note(owner, "Public", is_public=True)

        with pytest.raises(NotFoundError):
            await groups.share_note(member, group.id, note.id)

    async def test_non_member_cannot_share(self, groups, notes, make_user):
        owner = await make_user()
        outsider = await make_user()
        group = await groups.create_group(owner, "Study Group")
        note = await notes.create_note(outsider, "Lecture 1")

        with pytest.raises(AuthorizationError):
            await groups.share_note(outsider, group.id, note.id)

    async def test_sharing_twice_conflicts(self, groups, notes, make_user):
        owner = await make_user()
        group = await groups.create_group(owner, "Study Group")
        note = await notes.create_note(owner, "Lecture 1")
        await groups.share_note(owner, group.id, note.id)

        with pytest.raises(ConflictError):
            await groups.share_note(owner, group.id, note.id)

    async def test_group_owner_unshares_members_note(self, groups, notes, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)
        note = await notes.create_note(member, "Lecture 1")
        await groups.share_note(member, group.id, note.id)

        await groups.unshare_note(owner, group.id, note.id)

        assert await groups.list_group_notes(owner, group.id) == []
        assert (await notes.get_note(member, note.id)).id == note.id

    async def test_other_member_cannot_unshare(self, groups, notes, make_user):
        owner = await make_user()
        author = await make_user()
        bystander = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, author.id)
        await groups.add_member(owner, group.id, bystander.id)
        note = await notes.create_note(author, "Lecture 1")
        await groups.share_note(author, group.id, note.id)

        with pytest.raises(AuthorizationError):
            await groups.unshare_note(bystander, group.id, note.id)

    async def test_leaving_revokes_read_access(self, groups, notes, make_user):
        owner = await make_user()
        member = await make_user()
        group = await groups.create_group(owner, "Study Group")
        await groups.add_member(owner, group.id, member.id)
        note = await notes.create_note(owner, "Lecture 1")
        await groups.share_note(owner, group.id, note.id)

        await groups.remove_member(member, group.id, member.id)

        with pytest.raises(NotFoundError):
            await notes.get_note(member, note.id)

    async def test_deleting_group_keeps_notes(self, groups, notes, make_user):
        owner = await make_user()
        group = await groups.create_group(owner, "Study Group")
        note = await notes.create_note(owner, "Lecture 1")
        await groups.share_note(owner, group.id, note.id)

        await groups.delete_group(owner, group.id)

        assert (await notes.get_note(owner, note.id)).id == note.id
        with pytest.raises(NotFoundError):
            await groups.get_group(owner, group.id)
