"""
Users API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
Why:   Automatic serialization of rows and OpenAPI doc generation.
How:   Responses are built from ORM rows (`from_attributes`). Inputs are
       built by services/validation.py only after the field rules passed,
       so these models never see invalid data.

Design Decision:
    Request bodies are not declared as FastAPI body models: the API answers
    with fixed 400 messages in a fixed check order, which Pydantic's 422
    error list cannot express.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    What:  One user row as returned to clients.
    Who:   GET /users/{id} returns one; every other users endpoint returns a list.
    """
    id: int = Field(description="Store-generated identifier")
    username: str = Field(description="3-20 characters")
    email: str = Field(description="Email address")
    age: float = Field(description="Age in years (max. 130)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every failing response.

    Example:
        {"error": "User not found"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Validated Inputs
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """All three fields of a new user, already validated."""
    username: str
    email: str
    age: float


class UserUpdate(BaseModel):
    """
    Fields supplied to a partial update. None means "keep the stored value".
    """
    username: Optional[str] = None
    email: Optional[str] = None
    age: Optional[float] = None
