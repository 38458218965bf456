"""
Books API - Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and generates the OpenAPI document from them.
Who:   Route handlers (request/response types) and BookService (output records).

Design Decision:
    Schemas are separate from the SQLAlchemy model: the request body never
    carries an id, while the response always does.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BookPayload(BaseModel):
    """
    What:  Body of POST /books and PUT /books/{id}.

    No content rules: empty and arbitrarily long strings are accepted.
    Unknown keys, including a client-supplied "id", are ignored.
    """
    title: str = Field(description="Book title")
    author: str = Field(description="Book author")

    model_config = ConfigDict(extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BookResponse(BaseModel):
    """
    What:  A persisted book as returned by every book endpoint.

    Immutable value record: equality compares all fields, and
    `model_copy(update={...})` yields a changed copy.
    """
    id: int = Field(description="Identifier assigned by the database")
    title: str = Field(description="Book title")
    author: str = Field(description="Book author")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class ErrorResponse(BaseModel):
    """
    What:  Error envelope shared by all endpoints.

    Example:
        {
            "error": "not_found",
            "message": "book with ID '999' was not found",
            "request_id": "1f2e3d4c"
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
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
