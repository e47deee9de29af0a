"""
Subject Schemas.

Pydantic schemas for subject API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from studynotes.schemas.note import NoteResponse


class SubjectCreate(BaseModel):
    """Schema for creating a subject."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Math"])
    description: str | None = None
    color: str | None = Field(
        default=None,
        description="Hex color, defaults to #3B82F6",
        examples=["#3B82F6"],
    )


class SubjectUpdate(BaseModel):
    """Schema for a partial subject update."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    color: str | None = None


class SubjectResponse(BaseModel):
    """Schema for a subject in API responses."""

    id: str
    name: str
    description: str | None = None
    color: str
    notes_count: int = Field(default=0, description="Notes currently under this subject")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubjectDetailResponse(SubjectResponse):
    """A subject with its notes, most recently updated first."""

    notes: list[NoteResponse] = Field(default_factory=list)
