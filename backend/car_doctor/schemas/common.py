"""
Car Doctor Backend — Shared Response Schemas
==============================================

What:  Pydantic models shared across routes: store write results, error
       bodies and the health check payload.
How:   Write results use camelCase aliases so the JSON matches what the
       existing frontend already reads (`insertedId`, `deletedCount`, ...).
       FastAPI serializes response models by alias.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Store Write Results
# ══════════════════════════════════════════════════════════════════════════


class InsertResult(BaseModel):
    """Outcome of inserting one document."""

    acknowledged: bool = Field(default=True)
    inserted_id: str = Field(alias="insertedId", description="Generated document id (hex)")

    model_config = {"populate_by_name": True}


class UpdateResult(BaseModel):
    """
    Outcome of updating one document.

    An unknown id is not an error: `matchedCount` is simply 0.
    """

    acknowledged: bool = Field(default=True)
    matched_count: int = Field(alias="matchedCount")
    modified_count: int = Field(alias="modifiedCount")
    upserted_id: Optional[str] = Field(default=None, alias="upsertedId")

    model_config = {"populate_by_name": True}


class DeleteResult(BaseModel):
    """Outcome of deleting one document; `deletedCount` is 0 for unknown ids."""

    acknowledged: bool = Field(default=True)
    deleted_count: int = Field(alias="deletedCount")

    model_config = {"populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "forbidden",
            "message": "Forbidden",
            "request_id": "9f1c2ab4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
