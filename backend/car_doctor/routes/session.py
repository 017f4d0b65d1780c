"""
Car Doctor Backend — Session Routes
=====================================

What:  Login (issue a session cookie) and logout (clear it).

Cookie attributes:
    name      COOKIE_NAME (default "token")
    HttpOnly  always
    Secure    COOKIE_SECURE
    SameSite  COOKIE_SAMESITE
    Max-Age   unset on login (browser-session cookie), 0 on logout

Login trusts the posted email: there is no credential check here, so any
caller can obtain a session for any address.
"""

import logging

from fastapi import APIRouter, Depends, Response

from car_doctor.config import settings
from car_doctor.middleware.auth import get_token_service
from car_doctor.schemas.common import ErrorResponse
from car_doctor.schemas.session import LogoutResponse, SessionRequest, SessionResponse
from car_doctor.services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["Session"])


@router.post(
    "",
    response_model=SessionResponse,
    responses={500: {"description": "Signing secret not configured", "model": ErrorResponse}},
    summary="Start a session for an email",
)
async def create_session(
    body: SessionRequest,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
) -> SessionResponse:
    token = tokens.issue(body.email)

    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    logger.info("Session issued (ttl=%ds)", tokens.ttl_seconds)
    return SessionResponse(success=True)


@router.get(
    "/logout",
    response_model=LogoutResponse,
    summary="Clear the session cookie",
)
async def logout(response: Response) -> LogoutResponse:
    """
    Tell the browser to drop the cookie (Max-Age=0).

    The token itself is not revoked; a copy keeps verifying until expiry.
    """
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return LogoutResponse(logout=True)
