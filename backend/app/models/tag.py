"""
Notekeep Backend: Tag SQLAlchemy Model
========================================

What:  ORM model for the `tags` table.
Who:   Used by TagService (CRUD) and NoteService (attaching tags to notes).

Uniqueness:
    (user_id, name) is unique. Two users may both own a tag called "Work";
    one user may not own two. TagService checks this before writing, and
    the constraint catches the race where two requests pass the check at once.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.note import generate_id, note_tags, utcnow

if TYPE_CHECKING:
    from app.models.note import Note


class Tag(Base):
    """A user-scoped label attachable to many notes."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

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

    notes: Mapped[List["Note"]] = relationship(
        secondary=note_tags,
        back_populates="tags",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, user_id='{self.user_id}', name='{self.name}')>"
