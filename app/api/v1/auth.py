"""Authentication API endpoints.

Signin is guarded by the per-client failed-attempt limiter: a blocked client
gets 429 before its credentials are even parsed, a failed check records an
attempt, and a successful one clears the client's history.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.auth.dependencies import (
    AuthenticatorDep,
    CurrentUser,
    LoginGuard,
    TokenSvc,
    require_signin_allowed,
    validate_bearer_token,
)
from app.auth.exceptions import SigningError
from app.errors import APIError, ErrorCode
from app.rate_limit import limiter
from app.schemas.auth import (
    AuthResponse,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    TokenUser,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest) -> AuthResponse:  # noqa: ARG001
    """Register a new user account.

    Needs a user store, which this service does not have.
    """
    raise APIError(ErrorCode.NOT_IMPLEMENTED, "User registration is not available")


@router.post("/signin", response_model=AuthResponse)
async def signin(
    body: SigninRequest,
    client_id: Annotated[str, Depends(require_signin_allowed)],
    guard: LoginGuard,
    authenticator: AuthenticatorDep,
    token_service: TokenSvc,
) -> AuthResponse:
    """Authenticate a user and return a session token."""
    user = await authenticator.authenticate(body.email, body.password)
    if user is None:
        guard.record_failed_attempt(client_id)
        logger.info(
            "Failed signin ip=%s attempts=%d", client_id, guard.attempt_count(client_id)
        )
        raise APIError(ErrorCode.INVALID_CREDENTIALS)
    if not user.is_active:
        guard.record_failed_attempt(client_id)
        raise APIError(ErrorCode.ACCOUNT_DISABLED)

    guard.reset(client_id)
    try:
        token = token_service.generate_token(user.id, user.username, user.email)
    except SigningError as exc:
        logger.exception("Failed to issue session token for user_id=%s", user.id)
        raise APIError(ErrorCode.INTERNAL_ERROR) from exc

    return AuthResponse(
        access_token=token,
        expires_at=token_service.get_token_expiration(token),
        user=user,
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshTokenRequest, token_service: TokenSvc) -> TokenResponse:
    """Exchange a still-valid session token for a fresh one."""
    claims = validate_bearer_token(token_service, body.refresh_token)
    try:
        token = token_service.refresh_token(claims)
    except SigningError as exc:
        logger.exception("Failed to refresh session token for user_id=%s", claims.user_id)
        raise APIError(ErrorCode.INTERNAL_ERROR) from exc
    return TokenResponse(access_token=token, expires_at=token_service.get_token_expiration(token))


@router.get("/me", response_model=TokenUser)
@limiter.limit("30/minute")
async def get_current_user_info(
    request: Request,  # noqa: ARG001
    current_user: CurrentUser,
) -> TokenUser:
    """Return the authenticated user's identity from the token claims."""
    return current_user
