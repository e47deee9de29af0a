"""
Auth Schemas.

Pydantic schemas for registration and login.
"""

from pydantic import BaseModel, Field

from studynotes.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Schema for registering an account."""

    email: str = Field(
        ...,
        max_length=255,
        description="Email in an allowed university domain",
        examples=["student@stud.ase.ro"],
    )
    password: str = Field(..., description="Plain password", examples=["secret1"])
    name: str = Field(..., max_length=100, description="Display name", examples=["Ana Popescu"])


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., max_length=255)
    password: str


class AuthResponse(BaseModel):
    """The account and a bearer token for it."""

    user: UserResponse
    token: str = Field(description="Bearer token for the Authorization header")
    token_type: str = "bearer"
