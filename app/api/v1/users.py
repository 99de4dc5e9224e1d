"""User management API endpoints.

Every route requires a valid session token and is audit-logged. There is no
user store behind this service, so requests are validated and then answered
with ``NOT_IMPLEMENTED``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.auth.dependencies import get_current_user
from app.errors import APIError, ErrorCode
from app.schemas.user import (
    UserCreate,
    UserDeleteResponse,
    UserListQuery,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from app.utils.audit import audit_logged

router = APIRouter(dependencies=[Depends(get_current_user)])


def _no_user_store() -> APIError:
    return APIError(ErrorCode.NOT_IMPLEMENTED, "User management is not available")


@router.get(
    "",
    response_model=UserListResponse,
    dependencies=[Depends(audit_logged("list_users"))],
)
async def list_users(query: Annotated[UserListQuery, Query()]) -> UserListResponse:  # noqa: ARG001
    """List users with pagination, search and sorting."""
    raise _no_user_store()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(audit_logged("create_user"))],
)
async def create_user(body: UserCreate) -> UserResponse:  # noqa: ARG001
    """Create a new user account."""
    raise _no_user_store()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(audit_logged("get_user"))],
)
async def get_user(user_id: str) -> UserResponse:  # noqa: ARG001
    raise _no_user_store()


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(audit_logged("update_user"))],
)
async def update_user(user_id: str, body: UserUpdate) -> UserResponse:  # noqa: ARG001
    raise _no_user_store()


@router.delete(
    "/{user_id}",
    response_model=UserDeleteResponse,
    dependencies=[Depends(audit_logged("delete_user"))],
)
async def delete_user(user_id: str) -> UserDeleteResponse:  # noqa: ARG001
    raise _no_user_store()
