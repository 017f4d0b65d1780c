"""
Car Doctor Backend — Access Log Middleware
============================================

What:  One `car_doctor.access` line per request, tagged with the session
       outcome so rejected and accepted order traffic can be told apart.

Session outcome (the `auth` field):
    user=<email>      the auth dependency accepted a session cookie
    rejected=<reason> 401/403: missing_token, invalid_token,
                      expired_token or forbidden
    anonymous         route without a session check (catalog, order writes
                      outside strict mode, login itself)

Level:  5xx → ERROR, 401/403 → INFO (expected traffic), other 4xx → WARNING,
        anything else → INFO. /health is not logged.

Never logged: the cookie, the token, request bodies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from car_doctor.middleware.request_id import request_id_var

logger = logging.getLogger("car_doctor.access")

UNLOGGED_PATHS = frozenset({"/health"})


def session_outcome(request: Request) -> str:
    """Summarise what the auth layer decided for this request."""
    failure = getattr(request.state, "auth_failure", None)
    if failure:
        return f"rejected={failure}"
    identity = getattr(request.state, "identity", None)
    if identity is not None:
        return f"user={identity.email}"
    return "anonymous"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status in (401, 403):
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        auth = session_outcome(request)
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            auth,
            extra={
                "request_id": request_id_var.get(""),
                "status": response.status_code,
                "duration_ms": elapsed_ms,
                "auth": auth,
            },
        )
        return response
