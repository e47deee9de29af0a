"""
Unit Tests for Access Control Predicates.

Plain objects stand in for models; the predicates only read attributes.
"""

from types import SimpleNamespace

from studynotes.core.permissions import (
    can_manage_group,
    can_read_note,
    can_remove_member,
    can_see_group,
    is_group_member,
    owns_resource,
)


def note(user_id: str = "user-1", is_public: bool = False) -> SimpleNamespace:
    return SimpleNamespace(user_id=user_id, is_public=is_public)


def group(owner_id: str = "user-1", is_private: bool = False) -> SimpleNamespace:
    return SimpleNamespace(owner_id=owner_id, is_private=is_private)


class TestOwnsResource:

    def test_user_owned_resource(self, user):
        assert owns_resource(user, note(user_id="user-1")) is True

    def test_other_users_resource(self, user):
        assert owns_resource(user, note(user_id="user-9")) is False

    def test_group_uses_owner_id(self, user):
        assert owns_resource(user, group(owner_id="user-1")) is True
        assert owns_resource(user, group(owner_id="user-2")) is False

    def test_resource_without_owner(self, user):
        assert owns_resource(user, SimpleNamespace()) is False


class TestCanReadNote:

    def test_owner_reads_private_note(self, user):
        assert can_read_note(user, note(user_id="user-1")) is True

    def test_anyone_reads_public_note(self, other_user):
        assert can_read_note(other_user, note(is_public=True)) is True

    def test_outsider_cannot_read_private_note(self, other_user):
        assert can_read_note(other_user, note()) is False

    def test_shared_into_members_group(self, other_user):
        assert can_read_note(
            other_user,
            note(),
            shared_group_ids=["g1", "g2"],
            member_group_ids=["g2"],
        ) is True

    def test_shared_into_unrelated_group(self, other_user):
        assert can_read_note(
            other_user,
            note(),
            shared_group_ids=["g1"],
            member_group_ids=["g3"],
        ) is False


class TestGroupPredicates:

    def test_only_owner_manages(self, user, other_user):
        g = group(owner_id="user-1")
        assert can_manage_group(user, g) is True
        assert can_manage_group(other_user, g) is False

    def test_owner_counts_as_member_without_roster_entry(self, user):
        assert is_group_member(user, group(owner_id="user-1"), member_ids=[]) is True

    def test_roster_membership(self, other_user):
        g = group(owner_id="user-1")
        assert is_group_member(other_user, g, member_ids=["user-1", "user-2"]) is True
        assert is_group_member(other_user, g, member_ids=["user-1"]) is False

    def test_public_group_visible_to_outsiders(self, other_user):
        assert can_see_group(other_user, group(is_private=False)) is True

    def test_private_group_hidden_from_outsiders(self, other_user):
        assert can_see_group(other_user, group(is_private=True), member_ids=["user-1"]) is False

    def test_private_group_visible_to_members(self, other_user):
        assert can_see_group(other_user, group(is_private=True), member_ids=["user-2"]) is True

    def test_owner_removes_anyone(self, user):
        assert can_remove_member(user, group(owner_id="user-1"), "user-7") is True

    def test_member_removes_only_self(self, other_user):
        g = group(owner_id="user-1")
        assert can_remove_member(other_user, g, "user-2") is True
        assert can_remove_member(other_user, g, "user-3") is False
