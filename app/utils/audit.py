"""Audit logging for privileged actions."""

import logging

from fastapi import Request

from app.auth.dependencies import CurrentUser

logger = logging.getLogger("audit")


def audit_logged(action: str):
    """Dependency factory that logs privileged actions.

    Usage::

        @router.post("/users", dependencies=[Depends(audit_logged("create_user"))])
    """

    async def _log(request: Request, current_user: CurrentUser) -> None:
        client_ip = request.client.host if request.client else "unknown"
        request_id = getattr(request.state, "request_id", "n/a")
        logger.info(
            "AUDIT action=%s user_id=%s user=%s ip=%s request_id=%s path=%s",
            action,
            current_user.id,
            current_user.username,
            client_ip,
            request_id,
            request.url.path,
        )

    return _log
