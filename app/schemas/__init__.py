"""Pydantic schemas package."""
from app.schemas.auth import (
    AuthenticatedUser,
    AuthResponse,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    TokenUser,
)
from app.schemas.common import ErrorResponse, HealthResponse, HomeResponse, PaginationMeta
from app.schemas.user import (
    UserCreate,
    UserDeleteResponse,
    UserListQuery,
    UserListResponse,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Auth schemas
    "SigninRequest",
    "SignupRequest",
    "RefreshTokenRequest",
    "TokenUser",
    "AuthenticatedUser",
    "TokenResponse",
    "AuthResponse",
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserListQuery",
    "UserResponse",
    "UserListResponse",
    "UserDeleteResponse",
    # Common
    "ErrorResponse",
    "HealthResponse",
    "HomeResponse",
    "PaginationMeta",
]
