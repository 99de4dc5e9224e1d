"""Shared test fixtures for the vibe-storm API."""

import os

# Set test JWT secret before any app imports trigger Settings() validation.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-for-unit-tests-0123456789")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.auth.login_guard import LoginAttemptGuard  # noqa: E402
from app.auth.security import TokenService  # noqa: E402
from app.config import get_settings  # noqa: E402
from app.main import app  # noqa: E402
from app.rate_limit import limiter  # noqa: E402
from tests.helpers.token_factory import create_session_token  # noqa: E402

# ---------------------------------------------------------------------------
# Controllable clocks
# ---------------------------------------------------------------------------


class FakeMonotonic:
    """Stand-in for ``time.monotonic`` that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta.total_seconds()


@pytest.fixture()
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


# ---------------------------------------------------------------------------
# HTTP client fixture
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture()
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the FastAPI app.

    Each test gets a fresh signin guard and an empty slowapi window.
    """
    settings = get_settings()
    app.state.token_service = TokenService(settings.jwt_secret_key, settings.token_duration)
    app.state.login_guard = LoginAttemptGuard(
        settings.signin_max_attempts, settings.signin_window
    )
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Auth helpers: generate session tokens directly (no signin needed)
# ---------------------------------------------------------------------------


def _auth_headers(user_id: str = "user-123", username: str = "alice") -> dict[str, str]:
    """Return Authorization header dict with a valid session token."""
    token = create_session_token(user_id, username, f"{username}@vibestorm.io")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def auth_client(client) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client pre-authenticated as a regular user."""
    client.headers.update(_auth_headers())
    yield client
    client.headers.pop("Authorization", None)
