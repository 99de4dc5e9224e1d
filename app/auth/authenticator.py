"""Credential verification seam used by the signin endpoint.

This service has no user store, so the default authenticator rejects every
credential pair. Deployments that own users plug in their own implementation
through the ``get_authenticator`` dependency.
"""

from typing import Protocol

from app.schemas.auth import AuthenticatedUser


class Authenticator(Protocol):
    """Interface for checking signin credentials."""

    async def authenticate(self, email: str, password: str) -> AuthenticatedUser | None: ...


class RejectAllAuthenticator:
    """Authenticator for a service without a user store."""

    async def authenticate(
        self, email: str, password: str  # noqa: ARG002
    ) -> AuthenticatedUser | None:
        return None
