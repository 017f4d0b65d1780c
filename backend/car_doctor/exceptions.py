"""
Car Doctor Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure modes of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by services, the auth dependency and the store layer.

Exception Hierarchy:
    CarDoctorError (base)                → 500
    ├── ValidationError                  → 400 Bad Request
    ├── UnauthorizedError                → 401 Unauthorized
    │   └── TokenError
    │       ├── InvalidTokenError        → malformed / bad signature
    │       └── ExpiredTokenError        → TTL elapsed
    ├── ForbiddenError                   → 403 Forbidden
    ├── ConfigurationError               → 500 Internal Server Error
    ├── StoreUnavailableError            → 503 Service Unavailable
    └── StoreOperationError              → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class CarDoctorError(Exception):
    """
    Base exception for all Car Doctor application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CarDoctorError):
    """
    Raised when client input fails a business-rule check.

    When:    Malformed document id, forbidden keys in an order body.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, wrong types) are left to
    FastAPI, which answers 422 on its own.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(CarDoctorError):
    """
    Raised when a protected route is called without a valid session.

    When:    Missing `token` cookie, or the token fails verification.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenError(UnauthorizedError):
    """Base for session token verification failures."""

    reason = "invalid_token"


class InvalidTokenError(TokenError):
    """Token is malformed, carries a bad signature, or lacks the email claim."""

    reason = "invalid_token"

    def __init__(
        self,
        message: str = "Session token is invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ExpiredTokenError(TokenError):
    """Token signature is valid but its expiration time has passed."""

    reason = "expired_token"

    def __init__(
        self,
        message: str = "Session token has expired",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(CarDoctorError):
    """
    Raised when an authenticated identity acts on someone else's data.

    When:    GET /orders?email=... with an email other than the session's,
             or (strict mode) writing an order owned by another email.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(CarDoctorError):
    """
    Raised when a required setting is missing at the point of use.

    When:    Issuing a token while ACCESS_TOKEN_SECRET is empty.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The server is not configured correctly",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(CarDoctorError):
    """
    Raised when the document store cannot be reached.

    When:    Server selection timeout, connection refused, or the store
             handle was never created.
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "The document store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreOperationError(CarDoctorError):
    """
    Raised when a store operation fails for any other driver-level reason.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the driver
    error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
