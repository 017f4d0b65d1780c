"""
Car Doctor Backend — Root & Health Routes
===========================================

What:  `GET /` answers with a plain-text banner; `GET /health` reports
       document store connectivity for probes.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from car_doctor import __version__
from car_doctor.config import settings
from car_doctor.database import DocumentStore, get_store
from car_doctor.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Server banner")
async def root() -> str:
    return f"Car doctor server is running on port: {settings.port}"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: DocumentStore = Depends(get_store)):
    """
    Ping the document store and report the aggregate status.

    healthy   → 200, store answered the ping
    unhealthy → 503, store did not answer
    """
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: document store unreachable")

    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if connected:
        return body
    return JSONResponse(status_code=503, content=body.model_dump())
