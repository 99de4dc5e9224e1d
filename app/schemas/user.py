"""Pydantic schemas for user management."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.auth import check_strong_password, check_username
from app.schemas.common import PaginationMeta


class UserCreate(BaseModel):
    """Schema for creating a new user."""

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


class UserUpdate(BaseModel):
    """Schema for updating a user (all fields optional)."""

    email: EmailStr | None = None
    username: str | None = None
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return check_username(v) if v is not None else v


class UserListQuery(BaseModel):
    """Query parameters for listing users."""

    page: int = Field(1, ge=1)
    per_page: int = Field(10, ge=1, le=100)
    search: str | None = Field(None, max_length=100)
    sort_by: Literal["id", "email", "username", "created_at"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"
    is_active: bool | None = None


class UserResponse(BaseModel):
    """Public user information."""

    id: str
    email: EmailStr
    username: str
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: PaginationMeta


class UserDeleteResponse(BaseModel):
    message: str = "User deleted successfully"
