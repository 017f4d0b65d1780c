"""
Car Doctor Backend — Session Token Service
============================================

What:  Issues and verifies signed, time-limited session tokens bound to an
       email address.
How:   PyJWT with HS256. The only application claim is `email`; PyJWT
       adds `iat`/`exp` handling. Tokens are never stored server-side.
Who:   POST /session issues; the auth dependency verifies.

Lifecycle:
    issue(email) ──▶ "header.payload.signature" (valid for TTL seconds)
    verify(token) ──▶ Identity(email)
                  ├─▶ InvalidTokenError  (malformed, bad signature, no email)
                  └─▶ ExpiredTokenError  (exp has passed)

There is no revocation list and no refresh: logging out only drops the
cookie, and a copied token keeps verifying until it expires.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from car_doctor.config import settings
from car_doctor.exceptions import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidTokenError,
)
from car_doctor.schemas.session import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Tolerated difference between the issuing and verifying clocks, applied to
# both `exp` and the future-`iat` check PyJWT performs.
CLOCK_SKEW_LEEWAY = timedelta(seconds=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Stateless issuer/verifier for session tokens.

    Args:
        secret: HMAC signing key (ACCESS_TOKEN_SECRET).
        ttl_seconds: Token lifetime; 3600 by default.
        clock: Returns the current UTC time for `iat`/`exp` on issue.
            Verification uses the real clock with CLOCK_SKEW_LEEWAY, so a
            token stamped up to that far in the future still verifies and
            one stamped further ahead is rejected as invalid.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls) -> "TokenService":
        return cls(
            secret=settings.access_token_secret,
            ttl_seconds=settings.access_token_ttl_seconds,
        )

    def issue(self, email: str) -> str:
        """
        Create a signed token carrying `{email}` that expires after the TTL.

        Raises:
            ConfigurationError: No signing secret is configured.
        """
        if not self._secret:
            raise ConfigurationError(
                message="Session signing is not configured",
                context={"setting": "ACCESS_TOKEN_SECRET"},
            )
        issued_at = self._clock()
        payload = {
            "email": email,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Identity:
        """
        Check signature and expiry, returning the embedded identity.

        Raises:
            ExpiredTokenError: The signature is valid but `exp` has passed.
            InvalidTokenError: Anything else (malformed token, wrong key,
                unexpected algorithm, missing `exp` or `email`).
        """
        if not self._secret:
            raise InvalidTokenError(context={"reason": "no signing secret configured"})
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
                leeway=CLOCK_SKEW_LEEWAY,
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(context={"reason": type(e).__name__}) from e

        email = claims.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidTokenError(context={"reason": "missing email claim"})
        return Identity(email=email)


# ── Singleton Instance ────────────────────────────────────────────────────
token_service = TokenService.from_settings()
