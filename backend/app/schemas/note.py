"""
Notekeep Backend: Note Schemas
================================

What:  Pydantic models defining the /api/notes contract.
How:   FastAPI validates request bodies against NoteCreate / NoteUpdate and
       serializes NoteResponse by alias (camelCase).

Partial updates:
    NoteUpdate declares every patchable key as optional. Pydantic records
    which keys the client actually sent in `model_fields_set`; NoteService
    applies exactly those. That keeps three cases apart:
        key absent            → leave the stored value alone
        key present, null     → clear it (valid for `reminder` only)
        key present, value    → overwrite
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.tag import TagResponse


def _blank_reminder_to_none(value: Any) -> Any:
    # The web client sends "" when the reminder picker is cleared
    if isinstance(value, str) and not value.strip():
        return None
    return value


class NoteCreate(CamelModel):
    """
    Body of POST /api/notes. Every field is optional; NoteService fills
    defaults (empty strings, white color, false flags, no reminder, no images).
    """
    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None
    reminder: Optional[datetime] = Field(
        default=None,
        description="ISO 8601 timestamp, stored as UTC (naive values are taken as UTC); unparseable values are rejected with 400",
    )
    images: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = Field(default=None, description="Tags to attach")

    @field_validator("reminder", mode="before")
    @classmethod
    def blank_reminder_to_none(cls, value: Any) -> Any:
        return _blank_reminder_to_none(value)


class NoteUpdate(CamelModel):
    """Body of PATCH /api/notes/{id}. See module docstring for absent vs null."""
    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_deleted: Optional[bool] = None
    reminder: Optional[datetime] = None
    images: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = Field(
        default=None,
        description="Replaces the whole tag set when present; [] or null removes all tags",
    )

    @field_validator("reminder", mode="before")
    @classmethod
    def blank_reminder_to_none(cls, value: Any) -> Any:
        return _blank_reminder_to_none(value)


class NoteResponse(CamelModel):
    """Full representation of a note, tags included."""
    id: str
    user_id: str
    title: str
    content: str
    color: str
    is_pinned: bool
    is_archived: bool
    is_deleted: bool
    reminder: Optional[datetime] = None
    images: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    tags: List[TagResponse] = Field(default_factory=list)
