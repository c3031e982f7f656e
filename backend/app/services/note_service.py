"""
Notekeep Backend: Note Service (Business Logic)
=================================================

What:  List, fetch, create, partially update and permanently delete notes.
How:   Each method takes the request's AsyncSession and the caller's
       UserContext, runs its queries scoped to that user, and returns
       response models. Write methods commit before building the response,
       so a failed commit surfaces as DatabaseError (500), never as a 2xx.
Who:   Called by routes/notes.py.

Ownership:
    Every single-note operation goes through `_get_owned_note`, which
    filters on id AND user_id. A note that exists but belongs to someone
    else is reported exactly like a missing one (NotFoundError).

Error Handling Strategy:
    Application errors (NotFoundError, ValidationError) propagate unchanged.
    Anything else is logged with its stack trace and wrapped in
    DatabaseError carrying the generic "Failed to <verb> note(s)" message.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import DatabaseError, NotekeepError, NotFoundError, ValidationError
from app.models.note import DEFAULT_NOTE_COLOR, Note, as_utc, utcnow
from app.models.tag import Tag
from app.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from app.services.tag_service import to_tag_response
from app.security import UserContext

logger = logging.getLogger(__name__)


# Keys a PATCH may change directly on the row, and whether null is allowed.
# tag_ids is handled separately because it rewrites the association set.
PATCHABLE_FIELDS = (
    ("title", False),
    ("content", False),
    ("color", False),
    ("is_pinned", False),
    ("is_archived", False),
    ("is_deleted", False),
    ("reminder", True),
    ("images", False),
)


def to_note_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        user_id=note.user_id,
        title=note.title,
        content=note.content,
        color=note.color,
        is_pinned=note.is_pinned,
        is_archived=note.is_archived,
        is_deleted=note.is_deleted,
        reminder=as_utc(note.reminder),
        images=list(note.images or []),
        created_at=as_utc(note.created_at),
        updated_at=as_utc(note.updated_at),
        tags=[to_tag_response(tag) for tag in note.tags],
    )


class NoteService:
    """
    Business logic layer for note operations.

    Stateless: the session and the caller arrive with each call.
    """

    async def list_notes(
        self,
        db: AsyncSession,
        user: UserContext,
        archived: bool = False,
        deleted: bool = False,
        q: Optional[str] = None,
        reminders: Optional[bool] = None,
    ) -> List[NoteResponse]:
        """
        All of the caller's notes with exactly the given archived/deleted flags.

        Ordering: pinned notes first, then most recently updated first.
        No pagination; the full matching set is returned.

        Optional filters (both default to "no filter"):
            q:         case-insensitive substring of title, content or a tag name
            reminders: True → only notes with a reminder set

        Query plan:
            SELECT ... FROM notes
            WHERE user_id = :uid AND is_archived = :a AND is_deleted = :d
            ORDER BY is_pinned DESC, updated_at DESC
            → idx_notes_owner_flags; tags loaded with one extra SELECT ... IN
        """
        try:
            query = (
                select(Note)
                .where(
                    Note.user_id == user.user_id,
                    Note.is_archived == archived,
                    Note.is_deleted == deleted,
                )
                .options(selectinload(Note.tags))
                .order_by(Note.is_pinned.desc(), Note.updated_at.desc())
            )

            if q and q.strip():
                term = q.strip()
                query = query.where(
                    or_(
                        Note.title.icontains(term, autoescape=True),
                        Note.content.icontains(term, autoescape=True),
                        Note.tags.any(Tag.name.icontains(term, autoescape=True)),
                    )
                )

            if reminders:
                query = query.where(Note.reminder.is_not(None))

            result = await db.execute(query)
            notes = result.scalars().all()
            return [to_note_response(note) for note in notes]

        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error fetching notes for user %s: %s", user.user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, user: UserContext, note_id: str) -> NoteResponse:
        """
        Retrieve a single note owned by the caller.

        Raises:
            NotFoundError: Note missing or owned by someone else (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            note = await self._get_owned_note(db, user, note_id)
            return to_note_response(note)
        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error fetching note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

    async def create_note(self, db: AsyncSession, user: UserContext, payload: NoteCreate) -> NoteResponse:
        """
        Create a note for the caller.

        Defaults for omitted (or falsy) fields:
            title, content → ""        color  → "#ffffff"
            flags          → False     images → []
            reminder       → None

        tag_ids, when non-empty, are attached. The tags are looked up by id
        only; they are not checked against the caller (see DESIGN.md).

        Raises:
            ValidationError: one or more tag ids do not exist (→ 400)
            DatabaseError:   insert failed (→ 500)
        """
        try:
            tags = await self._resolve_tags(db, payload.tag_ids or [])

            note = Note(
                user_id=user.user_id,
                title=payload.title or "",
                content=payload.content or "",
                color=payload.color or DEFAULT_NOTE_COLOR,
                is_pinned=bool(payload.is_pinned),
                is_archived=bool(payload.is_archived),
                is_deleted=False,
                reminder=as_utc(payload.reminder),
                images=list(payload.images or []),
                tags=tags,
            )
            db.add(note)
            await db.flush()  # Assigns id and timestamps
            await db.commit()
            logger.info("Note %s created for user %s with %d tag(s)", note.id, user.user_id, len(tags))

            return to_note_response(note)

        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            )

    async def update_note(
        self,
        db: AsyncSession,
        user: UserContext,
        note_id: str,
        patch: NoteUpdate,
    ) -> NoteResponse:
        """
        Apply a partial update to a note owned by the caller.

        Only keys present in the request body are applied (`patch.model_fields_set`).
        An explicit null is accepted for `reminder` (clears it) and for
        `tagIds` (removes all tags); on any other field it is rejected.

        Tag replacement:
            When tagIds is present the note's tag set becomes exactly the
            supplied set. Old associations are dropped and new ones added in
            the same flush and committed together with the field changes.

        Raises:
            NotFoundError:   Note missing or owned by someone else (→ 404)
            ValidationError: null on a non-nullable field, or unknown tag id (→ 400)
            DatabaseError:   update failed (→ 500)
        """
        try:
            note = await self._get_owned_note(db, user, note_id)
            provided = patch.model_fields_set

            changes = {}
            for field, nullable in PATCHABLE_FIELDS:
                if field not in provided:
                    continue
                value = getattr(patch, field)
                if value is None and not nullable:
                    raise ValidationError(
                        message=f"Field '{field}' cannot be null",
                        field=field,
                    )
                changes[field] = as_utc(value) if field == "reminder" else value

            new_tags = None
            if "tag_ids" in provided:
                new_tags = await self._resolve_tags(db, patch.tag_ids or [])

            for field, value in changes.items():
                setattr(note, field, list(value) if field == "images" else value)

            if new_tags is not None:
                note.tags = new_tags

            note.updated_at = utcnow()
            await db.flush()
            await db.commit()
            logger.info(
                "Note %s updated: fields=%s tags_replaced=%s",
                note.id,
                sorted(changes),
                new_tags is not None,
            )

            return to_note_response(note)

        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

    async def delete_note(self, db: AsyncSession, user: UserContext, note_id: str) -> None:
        """
        Permanently delete a note owned by the caller.

        This is not the trash: moving a note to the trash is
        PATCH {isDeleted: true}. Tag associations are removed with the row.
        """
        try:
            note = await self._get_owned_note(db, user, note_id)
            await db.delete(note)
            await db.flush()
            await db.commit()
            logger.info("Note %s permanently deleted by user %s", note_id, user.user_id)
        except NotekeepError:
            raise
        except Exception as e:
            logger.error("Error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete note",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_owned_note(self, db: AsyncSession, user: UserContext, note_id: str) -> Note:
        # Tags are loaded eagerly: responses need them, and both tag
        # replacement and deletion touch the association rows.
        result = await db.execute(
            select(Note)
            .where(Note.id == note_id, Note.user_id == user.user_id)
            .options(selectinload(Note.tags))
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="Note", resource_id=note_id)
        return note

    async def _resolve_tags(self, db: AsyncSession, tag_ids: Sequence[str]) -> List[Tag]:
        """
        Load the tags for the given ids, keeping the caller's order.

        Duplicate ids collapse to one association. Unknown ids are a 400.
        """
        unique_ids = list(dict.fromkeys(tag_ids))
        if not unique_ids:
            return []

        result = await db.execute(select(Tag).where(Tag.id.in_(unique_ids)))
        by_id = {tag.id: tag for tag in result.scalars().all()}

        missing = [tag_id for tag_id in unique_ids if tag_id not in by_id]
        if missing:
            raise ValidationError(
                message="One or more tags do not exist",
                field="tagIds",
                context={"missing_tag_ids": missing},
                details={"missingTagIds": missing},
            )
        return [by_id[tag_id] for tag_id in unique_ids]


# Stateless; one instance shared by all requests
note_service = NoteService()
