"""Pydantic schemas for authentication."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.constants import PASSWORD_MIN_LENGTH, PASSWORD_SPECIAL_CHARS, USERNAME_PATTERN

_USERNAME_RE = re.compile(USERNAME_PATTERN)


def check_username(value: str) -> str:
    """3-20 characters; letters, numbers and underscores only."""
    if not _USERNAME_RE.match(value):
        raise ValueError(
            "Username must be 3-20 characters long and contain only letters, "
            "numbers, and underscores"
        )
    return value


def check_strong_password(value: str) -> str:
    """Require length plus upper, lower, digit and special character."""
    if (
        len(value) < PASSWORD_MIN_LENGTH
        or not any(c.isupper() for c in value)
        or not any(c.islower() for c in value)
        or not any(c.isdigit() for c in value)
        or not any(c in PASSWORD_SPECIAL_CHARS for c in value)
    ):
        raise ValueError(
            "Password must contain at least 8 characters with uppercase, lowercase, "
            "number, and special character"
        )
    return value


class SigninRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    email: EmailStr
    username: str
    password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_strong_password(v)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenUser(BaseModel):
    """Identity recovered from a session token. No DB query needed."""

    id: str
    username: str
    email: str = ""


class AuthenticatedUser(BaseModel):
    """User returned by an authenticator after a successful credential check."""

    id: str
    username: str
    email: EmailStr
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True


class TokenResponse(BaseModel):
    """Response schema for the refresh endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime


class AuthResponse(TokenResponse):
    """Response schema for signin/signup."""

    user: AuthenticatedUser
