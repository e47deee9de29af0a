"""
Access Control.

Pure authorization predicates consulted by every service. None of these
touch the database; callers load whatever membership/sharing facts a
predicate needs and pass them in.

Disclosure policy:
    A resource the caller cannot see at all is reported as NotFoundError,
    the same as a missing one. AuthorizationError is reserved for resources
    the caller can legitimately see but may not act on.
"""

from collections.abc import Iterable
from typing import Any


def owns_resource(user: Any, resource: Any) -> bool:
    """True if the resource belongs to the user. Groups use owner_id."""
    owner_id = getattr(resource, "owner_id", None)
    if owner_id is None:
        owner_id = getattr(resource, "user_id", None)
    return owner_id is not None and owner_id == user.id


def can_read_note(
    user: Any,
    note: Any,
    shared_group_ids: Iterable[str] = (),
    member_group_ids: Iterable[str] = (),
) -> bool:
    """
    Owner, public note, or shared into a group the user belongs to.

    Args:
        user: The caller
        note: The note being read
        shared_group_ids: Groups the note is shared into
        member_group_ids: Groups the caller owns or is enrolled in
    """
    if owns_resource(user, note) or note.is_public:
        return True
    return not set(shared_group_ids).isdisjoint(member_group_ids)


def can_manage_group(user: Any, group: Any) -> bool:
    return group.owner_id == user.id


def is_group_member(user: Any, group: Any, member_ids: Iterable[str] = ()) -> bool:
    """Owner or roster member."""
    return can_manage_group(user, group) or user.id in set(member_ids)


def can_see_group(user: Any, group: Any, member_ids: Iterable[str] = ()) -> bool:
    """Private groups are invisible to outsiders."""
    return not group.is_private or is_group_member(user, group, member_ids)


def can_remove_member(user: Any, group: Any, target_user_id: str) -> bool:
    """The manager removes anyone; everyone else only themselves."""
    return can_manage_group(user, group) or target_user_id == user.id
