"""
Car Doctor Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn car_doctor.main:app`), the `car-doctor` console
       script, and the test suite (which passes its own store).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────────────────────┐ │
    │  │ Req ID   │→│ Logging  │→│ CORS (one origin)    │ │
    │  └──────────┘ └──────────┘ └──────────────────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────┐ ┌────────┐ ┌──────────┐  │
    │  │ /session │ │/services │ │/orders │ │ / health │  │
    │  └──────────┘ └──────────┘ └────────┘ └──────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ 400 │ 401 │ 403 │ Store→503/500 │ other→500  │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Connect the document store unless one was injected

    Shutdown:
    1. Close the store if the lifespan created it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from car_doctor import __version__
from car_doctor.config import settings
from car_doctor.database import DocumentStore, MongoDocumentStore
from car_doctor.exceptions import (
    CarDoctorError,
    ForbiddenError,
    StoreOperationError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from car_doctor.middleware.logging import RequestLoggingMiddleware
from car_doctor.middleware.request_id import RequestIDMiddleware, request_id_var
from car_doctor.routes import catalog, legacy, orders, root, session
from car_doctor.services.token_service import TokenService, token_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger for the whole application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, config validation, store connection.
    Shutdown: close the store this handler opened.

    A failed connection does not stop the server: the store handle is
    kept (the driver reconnects on demand) and requests surface 503 until
    the deployment is reachable.
    """
    setup_logging()
    logger.info("Car Doctor backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        try:
            app.state.store = MongoDocumentStore.from_settings(settings)
            await app.state.store.connect()
        except (StoreUnavailableError, StoreOperationError) as e:
            logger.error(
                "MongoDB not ready at startup (%s): %s | Context: %s",
                type(e).__name__, e.message, e.context,
            )

    logger.info("Server is running on port: %d", settings.port)

    yield

    logger.info("Car Doctor backend shutting down...")
    if owns_store and app.state.store is not None:
        await app.state.store.close()
        app.state.store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, rid: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": rid}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError          → 400
        UnauthorizedError        → 401 (covers TokenError subclasses)
        ForbiddenError           → 403
        StoreUnavailableError    → 503
        StoreOperationError      → 500 (generic message)
        CarDoctorError (base)    → 500
        Exception (fallback)     → 500

    5xx bodies never carry internal details; those go to the log.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, rid, exc.context),
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        rid = request_id_var.get("")
        request.state.auth_failure = exc.context.get("reason", "unauthorized")
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthorized", "Unauthorized", rid),
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        rid = request_id_var.get("")
        request.state.auth_failure = "forbidden"
        return JSONResponse(
            status_code=403,
            content=_error_body("forbidden", "Forbidden", rid),
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        rid = request_id_var.get("")
        logger.error("[%s] Store unavailable | Context: %s", rid, exc.context)
        return JSONResponse(
            status_code=503,
            content=_error_body("store_unavailable", exc.message, rid),
        )

    @app.exception_handler(StoreOperationError)
    async def handle_store_error(request: Request, exc: StoreOperationError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later.", rid,
            ),
        )

    @app.exception_handler(CarDoctorError)
    async def handle_app_error(request: Request, exc: CarDoctorError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message, rid),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
                rid,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[DocumentStore] = None,
    tokens: Optional[TokenService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Document store to serve from. When omitted, the lifespan
            handler connects to MONGO_URI and owns the connection.
        tokens: Token service; defaults to the one built from settings.
    """
    app = FastAPI(
        title="Car Doctor API",
        description=(
            "Backend for the Car Doctor booking app: service catalog, "
            "orders, and cookie-based sessions."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.token_service = tokens or token_service

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(root.router)
    app.include_router(session.router)
    app.include_router(catalog.router)
    app.include_router(orders.router)
    if settings.enable_legacy_routes:
        app.include_router(legacy.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    uvicorn.run(
        "car_doctor.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
