# Middleware package init
"""
Car Doctor Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to requests before route logic.

Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → [auth dependency] → Route Handler

    - Request ID: correlation id for logs and the X-Request-ID header
    - Logging:    one access line per request with status and duration
    - CORS:       FastAPI's CORSMiddleware, single origin with credentials
    - auth:       `require_identity`, a FastAPI dependency declared only by
                  protected routes; it short-circuits with 401 by raising
"""
