"""
Tag Schemas.

Pydantic schemas for tag API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=50, examples=["exam"])


class TagSummary(BaseModel):
    """Tag as embedded in a note."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class TagResponse(BaseModel):
    """Schema for a tag in API responses."""

    id: str
    name: str
    created_at: datetime
    notes_count: int = Field(default=0, description="Notes currently carrying this tag")

    model_config = ConfigDict(from_attributes=True)
