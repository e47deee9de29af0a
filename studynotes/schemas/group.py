"""
Group Schemas.

Pydantic schemas for groups, rosters and shared notes.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from studynotes.schemas.note import NoteResponse
from studynotes.schemas.user import UserSummary


class GroupCreate(BaseModel):
    """Schema for creating a group."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Study Group"])
    description: str | None = None
    is_private: bool = Field(default=False, description="Hidden from non-members")


class GroupUpdate(BaseModel):
    """Schema for a partial group update."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_private: bool | None = None


class MemberAdd(BaseModel):
    """Schema for enrolling a user."""

    user_id: str
    role: Literal["member", "admin"] = "member"


class ShareNoteRequest(BaseModel):
    """Schema for sharing one of the caller's notes."""

    note_id: str


class MemberResponse(BaseModel):
    """Roster entry."""

    user_id: str
    role: str
    user: UserSummary
    created_at: datetime = Field(description="When the user joined")

    model_config = ConfigDict(from_attributes=True)


class GroupResponse(BaseModel):
    """Schema for a group in API responses."""

    id: str
    name: str
    description: str | None = None
    is_private: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupDetailResponse(GroupResponse):
    """A group with its roster and shared notes."""

    members: list[MemberResponse] = Field(default_factory=list)
    notes: list[NoteResponse] = Field(default_factory=list)


class GroupListResponse(BaseModel):
    """The caller's groups, split by relationship."""

    owned: list[GroupResponse]
    member: list[GroupResponse]


class SharedNoteResponse(BaseModel):
    """A note shared into a group."""

    group_id: str
    note_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
