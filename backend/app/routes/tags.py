"""
Notekeep Backend: Tags Route Handlers
=======================================

What:  /api/tags CRUD endpoints.
Who:   Called by the web client's tag sidebar and the note dialog's tag picker.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.tag import TagCreate, TagResponse, TagUpdate, TagWithCountResponse
from app.security import UserContext, get_current_user
from app.services.tag_service import tag_service

router = APIRouter(prefix="/api", tags=["Tags"])

_UNAUTHORIZED = {401: {"description": "No valid session", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Tag not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Missing or duplicate name", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


@router.get(
    "/tags",
    response_model=List[TagWithCountResponse],
    responses={**_UNAUTHORIZED, **_SERVER_ERROR},
    summary="List the caller's tags with note counts",
)
async def list_tags(
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[TagWithCountResponse]:
    return await tag_service.list_tags(db=db, user=user)


@router.post(
    "/tags",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED, **_SERVER_ERROR},
    summary="Create a tag",
)
async def create_tag(
    payload: TagCreate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    return await tag_service.create_tag(db=db, user=user, name=payload.name)


@router.patch(
    "/tags/{tag_id}",
    response_model=TagResponse,
    responses={**_BAD_REQUEST, **_UNAUTHORIZED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Rename a tag",
)
async def update_tag(
    tag_id: str,
    payload: TagUpdate,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TagResponse:
    return await tag_service.update_tag(db=db, user=user, tag_id=tag_id, name=payload.name)


@router.delete(
    "/tags/{tag_id}",
    response_model=MessageResponse,
    responses={**_UNAUTHORIZED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a tag and detach it from all notes",
)
async def delete_tag(
    tag_id: str,
    user: UserContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await tag_service.delete_tag(db=db, user=user, tag_id=tag_id)
    return MessageResponse(message="Tag deleted successfully")
