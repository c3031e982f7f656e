"""
Notekeep Backend: Notes Route Handlers
========================================

What:  /api/notes CRUD endpoints.
How:   Resolves the caller through the session gate, delegates to
       NoteService, and returns JSON with the matching status code.
Who:   Called by the web client's note grid, note dialog and sidebar views
       (notes / reminders / archive / trash).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from app.security import UserContext, get_current_user
from app.services.note_service import note_service

router = APIRouter(prefix="/api", tags=["Notes"])

_UNAUTHORIZED = {401: {"description": "No valid session", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={**_UNAUTHORIZED, **_SERVER_ERROR},
    summary="List the caller's notes",
    description=(
        "Returns every note of the caller whose archived/deleted flags match the "
        "query, pinned notes first, then most recently updated first."
    ),
)
async def list_notes(
    archived: bool = Query(default=False, description="Match notes in the archive"),
    deleted: bool = Query(default=False, description="Match notes in the trash"),
    q: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive search in title, content and tag names",
    ),
    reminders: Optional[bool] = Query(
        default=None,
        description="When true, only notes that have a reminder",
    ),
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """
    Example client usage (sidebar views):
        Notes:     GET /api/notes
        Reminders: GET /api/notes?reminders=true
        Archive:   GET /api/notes?archived=true
        Trash:     GET /api/notes?deleted=true
    """
    return await note_service.list_notes(
        db=db,
        user=user,
        archived=archived,
        deleted=deleted,
        q=q,
        reminders=reminders,
    )


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED, **_SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, user=user, payload=payload)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Get one of the caller's notes",
)
async def get_note(
    note_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Args:
        note_id: Opaque id. Another user's id yields the same 404 as an unknown one.
    """
    return await note_service.get_note(db=db, user=user, note_id=note_id)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Partially update a note",
    description=(
        "Only keys present in the body are changed. `reminder: null` clears the "
        "reminder; `tagIds` replaces the whole tag set."
    ),
)
async def update_note(
    note_id: str,
    patch: NoteUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db=db, user=user, note_id=note_id, patch=patch)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Permanently delete a note",
)
async def delete_note(
    note_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await note_service.delete_note(db=db, user=user, note_id=note_id)
    return MessageResponse(message="Note deleted successfully")
