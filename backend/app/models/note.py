"""
Notekeep Backend: Note SQLAlchemy Model
=========================================

What:  ORM model for the `notes` table and the `note_tags` association table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - id: Opaque string (uuid4 text). Clients treat it as a token, never parse it.
    - user_id: Owner. Every query filters on it; there is no cross-user read path.
    - is_deleted: "In the trash". Permanent deletion removes the row instead.
    - images: JSON list of opaque image references (data URLs or storage keys).
    - created_at / updated_at: UTC with timezone; updated_at is bumped on every
      successful update, including tag-only changes.

Index on (user_id, is_archived, is_deleted):
    Matches the list query, which always filters on all three columns.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.tag import Tag


DEFAULT_NOTE_COLOR = "#ffffff"


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ── Association Table ─────────────────────────────────────────────────────
# Many-to-many Note ↔ Tag. Rows disappear with either side: the ORM deletes
# them when a Note or Tag is deleted, and ON DELETE CASCADE covers raw SQL.
note_tags = Table(
    "note_tags",
    Base.metadata,
    Column("note_id", String(36), ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Note(Base):
    """
    A user-owned note.

    Lifecycle:
        1. Created with defaults for omitted fields
        2. Mutated field-by-field by partial updates
        3. Optionally pinned / archived / trashed (any combination is valid)
        4. Removed only by explicit permanent deletion
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Owner; taken from the session, never from the request body",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    color: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_NOTE_COLOR,
        server_default=text(f"'{DEFAULT_NOTE_COLOR}'"),
    )

    # ── Flags ─────────────────────────────────────────────────────────────
    is_pinned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    reminder: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # ── Relationships ─────────────────────────────────────────────────────
    # order_by keeps the tag list stable between responses
    tags: Mapped[List["Tag"]] = relationship(
        secondary=note_tags,
        back_populates="notes",
        order_by="Tag.name",
    )

    __table_args__ = (
        Index("idx_notes_owner_flags", "user_id", "is_archived", "is_deleted"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, user_id='{self.user_id}', "
            f"pinned={self.is_pinned}, archived={self.is_archived}, deleted={self.is_deleted})>"
        )
