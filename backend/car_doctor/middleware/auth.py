"""
Car Doctor Backend — Session Authentication
=============================================

What:  Cookie-based authentication for protected routes.
How:   FastAPI dependencies, resolved before the route body runs:

    require_identity
        1. Read the session cookie (COOKIE_NAME, default "token")
        2. Missing → UnauthorizedError (401); the handler never runs
        3. TokenService.verify() fails → UnauthorizedError (401)
        4. Success → request.state.identity = Identity, returned to handler

    order_write_identity
        Returns None unless REQUIRE_AUTH_FOR_ORDER_WRITES is on, in which
        case it behaves exactly like require_identity.

Who:   GET /orders always; POST/PUT/DELETE on orders in strict mode.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from car_doctor.config import settings
from car_doctor.exceptions import TokenError, UnauthorizedError
from car_doctor.schemas.session import Identity
from car_doctor.services.token_service import TokenService, token_service

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    """The token service installed by create_app, or the module singleton."""
    return getattr(request.app.state, "token_service", None) or token_service


async def require_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    token = request.cookies.get(settings.cookie_name)
    if not token:
        logger.info("Rejected %s %s: no session cookie", request.method, request.url.path)
        raise UnauthorizedError(context={"reason": "missing_token"})

    try:
        identity = tokens.verify(token)
    except TokenError as e:
        logger.info(
            "Rejected %s %s: %s", request.method, request.url.path, e.reason,
        )
        raise UnauthorizedError(context={"reason": e.reason}) from e

    request.state.identity = identity
    return identity


async def order_write_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> Optional[Identity]:
    if not settings.require_auth_for_order_writes:
        return None
    return await require_identity(request, tokens)
