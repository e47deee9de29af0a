"""
Attachment Schemas.

Metadata of uploaded files. Storage paths are never exposed.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AttachmentResponse(BaseModel):
    """Schema for an attachment in API responses."""

    id: str = Field(description="Attachment unique identifier")
    filename: str = Field(description="Generated storage name")
    original_name: str = Field(description="Name of the uploaded file")
    mime_type: str
    size: int = Field(description="Size in bytes")
    note_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
