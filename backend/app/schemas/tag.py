"""
Notekeep Backend: Tag Schemas
===============================

What:  Request bodies and responses for /api/tags.

TagCreate / TagUpdate keep `name` optional on purpose: a missing or blank
name is a business-rule failure ("Tag name is required", 400) raised by
TagService, not a schema error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import CamelModel


class TagCreate(CamelModel):
    name: Optional[str] = Field(default=None, description="Tag label, unique per user")


class TagUpdate(CamelModel):
    name: Optional[str] = Field(default=None, description="New tag label")


class TagResponse(CamelModel):
    """A tag as embedded in notes and returned by create/rename."""
    id: str
    user_id: str
    name: str
    created_at: datetime
    updated_at: datetime


class TagCount(BaseModel):
    notes: int = Field(description="Number of notes currently carrying this tag")


class TagWithCountResponse(TagResponse):
    """
    List item for GET /api/tags.

    Serialized as `_count: {"notes": n}`, the shape the web client reads.
    """
    count: TagCount = Field(alias="_count")
