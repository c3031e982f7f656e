"""
Notekeep Backend: Session Gate
================================

What:  Resolves the caller's user id from a signed session token, or rejects
       the request with 401 before any handler logic runs.
How:   `Authorization: Bearer <jwt>`; signature and expiry are verified with
       python-jose using the secret shared with the authentication service.
       The `sub` claim is the user id.
Who:   Every /api/notes and /api/tags route depends on `get_current_user`.

The resolved identity travels as an explicit `UserContext` argument into the
services. Nothing stores "the current user" at module level.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from app.config import settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger("notekeep.security")

# auto_error=False: a missing header must produce our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


class UserContext(BaseModel):
    """Request-scoped identity of the authenticated caller."""

    model_config = ConfigDict(frozen=True)

    user_id: str


def _mask_user_id(user_id: Optional[str]) -> str:
    value = (user_id or "").strip()
    if not value:
        return "-"
    if len(value) <= 8:
        return value
    return f"{value[:4]}...{value[-4:]}"


def _audit_auth_failure(request: Request, reason: str, claimed_user_id: Optional[str] = None) -> None:
    client = request.client
    logger.warning(
        "AUTH_DENY reason=%s method=%s path=%s ip=%s claimed=%s",
        reason,
        request.method,
        request.url.path,
        client.host if client else "-",
        _mask_user_id(claimed_user_id),
    )


def decode_session_token(token: str) -> str:
    """
    Verify a session token and return its subject (the user id).

    Raises:
        UnauthorizedError: bad signature, expired, malformed, or no `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
        )
    except JWTError as e:
        raise UnauthorizedError(reason="invalid_token", context={"detail": str(e)})

    subject = payload.get("sub")
    if not subject or not str(subject).strip():
        raise UnauthorizedError(reason="token_missing_sub")
    return str(subject)


def issue_session_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """
    Mint a token that `get_current_user` accepts.

    Sign-in itself belongs to the authentication service; this exists for
    tests and local tooling that need a valid session for a given user.
    """
    if expires_in is None:
        expires_in = timedelta(minutes=settings.auth_token_ttl_minutes)
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(claims, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserContext:
    """
    FastAPI dependency: the single authorization gate.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(user: UserContext = Depends(get_current_user)):
            ...

    Raises:
        UnauthorizedError → 401 {"error": "Unauthorized"}
    """
    if credentials is None or not credentials.credentials:
        _audit_auth_failure(request, "missing_session")
        raise UnauthorizedError(reason="missing_session")

    try:
        user_id = decode_session_token(credentials.credentials)
    except UnauthorizedError as e:
        _audit_auth_failure(request, e.reason)
        raise

    request.state.user_id = user_id
    return UserContext(user_id=user_id)
