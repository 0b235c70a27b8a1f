"""Pydantic schemas for accounts, sessions and profiles.

Learn: Separate "Request" schemas (input) from "Read" schemas (output).
Input schemas do the validation the API promises before anything is
persisted: email format, password length, closed role set.
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from publisher.schemas.common import CamelModel

MIN_PASSWORD_LENGTH = 6

# Roles a user can pick at sign-up. reader/admin are granted elsewhere.
RegistrationRole = Literal["author", "translator", "editor"]


def _normalize_email(value: str) -> str:
    return value.strip().lower()


# ─── Auth requests ──────────────────────────────────────


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: RegistrationRole
    pen_name: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, min_length=2, max_length=2)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    # Which active role to put in the token. Defaults to the earliest-assigned one.
    role: Optional[Literal["author", "translator", "editor", "reader", "admin"]] = None

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return _normalize_email(value)


# ─── Responses ──────────────────────────────────────────


class UserSummary(CamelModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    pen_name: Optional[str] = None
    role: Optional[str] = None


class AuthResponse(CamelModel):
    message: str
    user: UserSummary
    token: str


class ProfileRead(CamelModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    pen_name: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    verified: bool = False
    roles: list[str] = []
    created_at: Optional[datetime] = None


class ProfileEnvelope(CamelModel):
    user: ProfileRead


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    pen_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None
    country: Optional[str] = Field(None, min_length=2, max_length=2)


class ProfileUpdated(CamelModel):
    message: str
    user: ProfileRead


class PublicProfile(CamelModel):
    """Profile as seen by anyone — no email."""
    id: uuid.UUID
    first_name: str
    last_name: str
    pen_name: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    verified: bool = False
    roles: list[str] = []
    work_count: int = 0


class PublicProfileEnvelope(CamelModel):
    user: PublicProfile
