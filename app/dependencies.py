"""Construction of shared components and app-wide FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from app.auth.login_guard import LoginAttemptGuard
from app.auth.security import TokenService
from app.config import Settings, get_settings

# ---------------------------------------------------------------------------
# Factory helpers, called from main.py when the application is built
# ---------------------------------------------------------------------------


def create_token_service(settings: Settings) -> TokenService:
    """Create the session token service from JWT settings."""
    return TokenService(settings.jwt_secret_key, settings.token_duration)


def create_login_guard(settings: Settings) -> LoginAttemptGuard:
    """Create the signin brute-force guard shared by all signin requests."""
    return LoginAttemptGuard(settings.signin_max_attempts, settings.signin_window)


# ---------------------------------------------------------------------------
# Type aliases for cleaner dependency injection
# ---------------------------------------------------------------------------
AppSettings = Annotated[Settings, Depends(get_settings)]
