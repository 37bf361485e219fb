"""User schema definitions.

This module defines the User data model and the request/response bodies of
the authentication endpoints.
"""

import uuid
from datetime import datetime

import pytz
from pydantic import BaseModel, EmailStr, Field, field_validator


def normalize_email(value: str) -> str:
    """Emails are matched case-insensitively; store them lower-cased."""
    return value.strip().lower()


class User(BaseModel):
    """Internal user record, including the password hash."""
    user_id: str = Field(
        description="The unique identifier for the user.",
        default_factory=lambda: uuid.uuid4().hex,
    )
    name: str
    email: str
    college: str = ""
    password_hash: str
    create_at: str = Field(
        default_factory=lambda: datetime.now(pytz.utc).isoformat()
    )


class UserProfile(BaseModel):
    """Public view of a user; never carries the password hash."""
    id: str
    name: str
    email: str
    college: str
    createdAt: str

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            college=user.college,
            createdAt=user.create_at,
        )


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    college: str = Field(default="", max_length=255)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name", "college", mode="after")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class AuthResponse(BaseModel):
    """Returned by register and login."""
    token: str
    user: UserProfile
