"""
Car Doctor Backend — Request ID Middleware
============================================

What:  Correlates a request across the access log, error logs and the
       JSON error body (`request_id`), and echoes it in `X-Request-ID`.
How:   A client-supplied `X-Request-ID` is kept only if it is a short
       token of letters, digits, `.`, `_` or `-`; anything else (spaces,
       control characters, oversized values) is replaced by a fresh
       8-character hex id, so the id is always safe to embed in a log line.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Read by the access log and by every exception handler.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Keep a well-formed client id, otherwise mint one."""
    if supplied and _ACCEPTED_ID.fullmatch(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(HEADER))
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[HEADER] = rid
        return response
