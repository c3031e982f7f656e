"""
Notekeep Backend: Shared Pydantic Schemas
===========================================

What:  Base model for the camelCase API contract plus response shapes
       shared by every router (errors, messages, health).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API schema.

    Python code uses snake_case field names; the JSON contract is camelCase
    (`isPinned`, `tagIds`, `createdAt`). FastAPI serializes responses by
    alias, and populate_by_name lets services build models with field names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Returned by DELETE endpoints instead of the removed record."""
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "Note not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Field-level validation context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """
    Health check response.

    status is "healthy" when the database answers SELECT 1, "unhealthy" otherwise.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
