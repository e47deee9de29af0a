"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from studynotes.schemas.attachment import AttachmentResponse
from studynotes.schemas.tag import TagSummary


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Note title",
        examples=["Lecture 1"],
    )
    content: str | None = Field(
        default=None,
        description="Note content",
        examples=["Limits and continuity."],
    )
    subject_id: str | None = Field(default=None, description="One of the caller's subjects")
    tag_ids: list[str] = Field(
        default_factory=list,
        description="Caller's tags; unknown ids are ignored",
    )
    is_public: bool = Field(default=False, description="Readable by every user")


class NoteUpdate(BaseModel):
    """
    Schema for updating an existing note.

    Only fields present in the request body are changed. A present
    tag_ids replaces the tag set; a null subject_id clears the subject.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = None
    subject_id: str | None = None
    tag_ids: list[str] | None = None
    is_public: bool | None = None


class NoteSubject(BaseModel):
    """Subject as embedded in a note."""

    id: str
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str | None = Field(description="Note content")
    is_public: bool = Field(description="Whether every user may read the note")
    user_id: str = Field(description="Owner")
    subject_id: str | None = None
    subject: NoteSubject | None = None
    tags: list[TagSummary] = Field(default_factory=list)
    attachments: list[AttachmentResponse] = Field(default_factory=list)
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
