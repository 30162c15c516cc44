"""
Admin credential gate.

Mutating routes require ``Authorization: Bearer <admin secret>``. The secret
comes from the application's settings, fixed when the app is built.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.routing import APIRoute

from .errors import AuthorizationFailure

logger = logging.getLogger(__name__)


def expected_authorization(secret: str) -> str:
    return f"Bearer {secret}"


def tokens_match(presented: Optional[str], expected: str) -> bool:
    """Single comparison point for admin credentials (exact string equality)."""
    return presented is not None and presented == expected


def is_authorized(authorization: Optional[str], secret: Optional[str]) -> bool:
    # An unconfigured secret never authorizes anything.
    if not secret:
        return False
    return tokens_match(authorization, expected_authorization(secret))


def require_admin(request: Request) -> None:
    """Reject the request unless it carries the admin credential."""
    secret = request.app.state.settings.auth.admin_token
    if not is_authorized(request.headers.get("authorization"), secret):
        logger.warning(f"Rejected admin request: {request.method} {request.url.path}")
        raise AuthorizationFailure()


class AdminRoute(APIRoute):
    """
    Route that checks the admin credential before FastAPI reads the body.

    Body parsing and parameter validation only happen for authorized
    requests, so a malformed payload without a token is still a 401.
    """

    def get_route_handler(self) -> Callable:
        route_handler = super().get_route_handler()

        async def admin_route_handler(request: Request) -> Response:
            require_admin(request)
            return await route_handler(request)

        return admin_route_handler
