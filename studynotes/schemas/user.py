"""
User Schemas.

Pydantic schemas for profile request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Schema for the caller's own account in API responses."""

    id: str = Field(description="User unique identifier")
    email: str = Field(description="Login email")
    name: str = Field(description="Display name")
    avatar: str | None = Field(default=None, description="Avatar URL")
    is_active: bool = Field(description="Whether the account may log in")
    created_at: datetime = Field(description="Registration timestamp")

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Public view of another user."""

    id: str
    name: str
    avatar: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Display name",
    )
    avatar: str | None = Field(
        default=None,
        max_length=500,
        description="Avatar URL",
    )
