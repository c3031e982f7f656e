"""
Notekeep Backend: Tag Service (Business Logic)
================================================

What:  List (with note counts), create, rename and delete the caller's tags.
Who:   Called by routes/tags.py.

Name rules:
    - Required and non-blank; surrounding whitespace is stripped.
    - Unique per owner. Checked with a query first; the (user_id, name)
      unique constraint turns a lost race into the same 400 conflict.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    ConflictError,
    DatabaseError,
    NotekeepError,
    NotFoundError,
    ValidationError,
)
from app.models.note import as_utc, note_tags, utcnow
from app.models.tag import Tag
from app.schemas.tag import TagCount, TagResponse, TagWithCountResponse
from app.security import UserContext

logger = logging.getLogger(__name__)


def to_tag_response(tag: Tag) -> TagResponse:
    return TagResponse(
        id=tag.id,
        user_id=tag.user_id,
        name=tag.name,
        created_at=as_utc(tag.created_at),
        updated_at=as_utc(tag.updated_at),
    )


def _require_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(message="Tag name is required", field="name")
    return cleaned


class TagService:
    """Business logic layer for tag operations."""

    async def list_tags(self, db: AsyncSession, user: UserContext) -> List[TagWithCountResponse]:
        """
        The caller's tags, alphabetical, each with its note count.

        Query plan:
            SELECT tags.*, count(note_tags.note_id)
            FROM tags LEFT JOIN note_tags ON note_tags.tag_id = tags.id
            WHERE tags.user_id = :uid
            GROUP BY tags.id ORDER BY tags.name
        """
        try:
            note_count = func.count(note_tags.c.note_id).label("note_count")
            result = await db.execute(
                select(Tag, note_count)
                .outerjoin(note_tags, note_tags.c.tag_id == Tag.id)
                .where(Tag.user_id == user.user_id)
                .group_by(Tag.id)
                .order_by(Tag.name.asc())
            )
            return [
                TagWithCountResponse(
                    id=tag.id,
                    user_id=tag.user_id,
                    name=tag.name,
                    created_at=as_utc(tag.created_at),
                    updated_at=as_utc(tag.updated_at),
                    count=TagCount(notes=count),
                )
                for tag, count in result.all()
            ]
        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error fetching tags for user %s: %s", user.user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch tags",
                context={"error_type": type(e).__name__},
            )

    async def create_tag(self, db: AsyncSession, user: UserContext, name: Optional[str]) -> TagResponse:
        """
        Create a tag for the caller.

        Raises:
            ValidationError: name missing or blank (→ 400)
            ConflictError:   caller already has a tag with this name (→ 400)
        """
        cleaned = _require_name(name)
        try:
            if await self._find_by_name(db, user, cleaned) is not None:
                raise ConflictError(message="Tag already exists", context={"name": cleaned})

            tag = Tag(user_id=user.user_id, name=cleaned)
            db.add(tag)
            await db.flush()
            await db.commit()
            logger.info("Tag %s ('%s') created for user %s", tag.id, cleaned, user.user_id)
            return to_tag_response(tag)

        except NotekeepError:
            raise
        except IntegrityError:
            raise ConflictError(message="Tag already exists", context={"name": cleaned, "race": True})
        except Exception as e:
            logger.error("Error creating tag: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create tag",
                context={"error_type": type(e).__name__},
            )

    async def update_tag(
        self,
        db: AsyncSession,
        user: UserContext,
        tag_id: str,
        name: Optional[str],
    ) -> TagResponse:
        """
        Rename one of the caller's tags.

        Raises:
            ValidationError: name missing or blank (→ 400)
            NotFoundError:   tag missing or owned by someone else (→ 404)
            ConflictError:   another of the caller's tags has this name (→ 400)
        """
        cleaned = _require_name(name)
        try:
            tag = await self._get_owned_tag(db, user, tag_id)

            duplicate = await self._find_by_name(db, user, cleaned)
            if duplicate is not None and duplicate.id != tag.id:
                raise ConflictError(
                    message="Tag with this name already exists",
                    context={"name": cleaned, "tag_id": tag_id},
                )

            tag.name = cleaned
            tag.updated_at = utcnow()
            await db.flush()
            await db.commit()
            logger.info("Tag %s renamed to '%s'", tag_id, cleaned)
            return to_tag_response(tag)

        except NotekeepError:
            raise
        except IntegrityError:
            raise ConflictError(
                message="Tag with this name already exists",
                context={"name": cleaned, "tag_id": tag_id, "race": True},
            )
        except Exception as e:
            logger.error("Error updating tag %s: %s", tag_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update tag",
                context={"tag_id": tag_id, "error_type": type(e).__name__},
            )

    async def delete_tag(self, db: AsyncSession, user: UserContext, tag_id: str) -> None:
        """
        Delete one of the caller's tags. Notes carrying it lose the tag and
        are otherwise untouched.
        """
        try:
            tag = await self._get_owned_tag(db, user, tag_id, with_notes=True)
            await db.delete(tag)
            await db.flush()
            await db.commit()
            logger.info("Tag %s deleted by user %s", tag_id, user.user_id)
        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error deleting tag %s: %s", tag_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete tag",
                context={"tag_id": tag_id, "error_type": type(e).__name__},
            )

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_owned_tag(
        self,
        db: AsyncSession,
        user: UserContext,
        tag_id: str,
        with_notes: bool = False,
    ) -> Tag:
        query = select(Tag).where(Tag.id == tag_id, Tag.user_id == user.user_id)
        if with_notes:
            # The association rows are removed through this collection
            query = query.options(selectinload(Tag.notes))
        result = await db.execute(query)
        tag = result.scalar_one_or_none()
        if tag is None:
            raise NotFoundError(resource="Tag", resource_id=tag_id)
        return tag

    async def _find_by_name(self, db: AsyncSession, user: UserContext, name: str) -> Optional[Tag]:
        result = await db.execute(
            select(Tag).where(Tag.user_id == user.user_id, Tag.name == name)
        )
        return result.scalar_one_or_none()


tag_service = TagService()
