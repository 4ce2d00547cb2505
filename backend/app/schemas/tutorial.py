"""
Tutorials API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the JSON contract of the API.
Why:   Input validation, serialization, and OpenAPI docs come from these.
How:   Request models are permissive (title may be missing so the service can
       answer 400 with its own message); response models read ORM attributes.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TutorialCreate(BaseModel):
    """Body of POST /api/tutorials. A blank title is rejected by the service."""
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: bool = False


class TutorialUpdate(BaseModel):
    """
    Body of PUT /api/tutorials/{id}.

    Partial update: only fields present in the body are applied
    (model_dump(exclude_unset=True)). An empty body is a 400.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    published: Optional[bool] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TutorialResponse(BaseModel):
    id: uuid.UUID = Field(description="Unique tutorial identifier")
    title: str
    description: Optional[str] = None
    published: bool
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}

    @field_serializer("id")
    def serialize_id(self, value: uuid.UUID) -> str:
        return str(value)


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by update and delete routes."""
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Not found Tutorial with id 5f1c...",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
