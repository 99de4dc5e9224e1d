"""FastAPI dependencies for authentication and signin protection."""

import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from app.auth.authenticator import Authenticator, RejectAllAuthenticator
from app.auth.exceptions import TokenError
from app.auth.login_guard import LoginAttemptGuard
from app.auth.security import SessionClaims, TokenService
from app.errors import APIError, ErrorCode
from app.rate_limit import get_client_ip
from app.schemas.auth import TokenUser

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "
_WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


# ---------------------------------------------------------------------------
# Shared components, created by the application factory and kept on app.state
# ---------------------------------------------------------------------------


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_login_guard(request: Request) -> LoginAttemptGuard:
    return request.app.state.login_guard


def get_authenticator() -> Authenticator:
    return RejectAllAuthenticator()


def get_client_id(request: Request) -> str:
    """Identifier the signin guard counts failures against."""
    return get_client_ip(request)


TokenSvc = Annotated[TokenService, Depends(get_token_service)]
LoginGuard = Annotated[LoginAttemptGuard, Depends(get_login_guard)]
AuthenticatorDep = Annotated[Authenticator, Depends(get_authenticator)]
ClientId = Annotated[str, Depends(get_client_id)]


# ---------------------------------------------------------------------------
# Bearer token authentication
# ---------------------------------------------------------------------------


def _unauthorized(message: str) -> APIError:
    return APIError(ErrorCode.UNAUTHORIZED, message, headers=_WWW_AUTHENTICATE)


def validate_bearer_token(token_service: TokenService, token: str) -> SessionClaims:
    """Validate *token*, collapsing every failure into a 401 ``APIError``."""
    try:
        return token_service.validate_token(token)
    except TokenError as exc:
        logger.warning("Rejected session token: %s", type(exc).__name__)
        raise _unauthorized(exc.reason) from exc


async def get_session_claims(
    token_service: TokenSvc,
    authorization: Annotated[str | None, Header()] = None,
) -> SessionClaims:
    """Require ``Authorization: Bearer <token>`` and return its validated claims."""
    if not authorization:
        raise _unauthorized("Authorization header is required")
    if not authorization.startswith(_BEARER_PREFIX):
        raise _unauthorized("Authorization header must start with Bearer")
    return validate_bearer_token(token_service, authorization.removeprefix(_BEARER_PREFIX))


SessionClaimsDep = Annotated[SessionClaims, Depends(get_session_claims)]


async def get_current_user(claims: SessionClaimsDep) -> TokenUser:
    """Return the user identity carried by the bearer token."""
    if not claims.user_id:
        raise _unauthorized("Invalid token claims")
    return TokenUser(id=claims.user_id, username=claims.username, email=claims.email)


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]


# ---------------------------------------------------------------------------
# Signin brute-force protection
# ---------------------------------------------------------------------------


async def require_signin_allowed(guard: LoginGuard, client_id: ClientId) -> str:
    """Reject the request with 429 while *client_id* is over the failure limit.

    Runs before the request body is validated and never consumes an attempt.
    """
    if guard.is_blocked(client_id):
        logger.warning("Blocked signin attempt due to rate limiting ip=%s", client_id)
        raise APIError(ErrorCode.TOO_MANY_REQUESTS, "Too many failed signin attempts")
    return client_id
