"""
Notekeep Backend: Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services and the session gate; caught by global handlers.

Exception Hierarchy:
    NotekeepError (base)
    ├── ValidationError    → 400 Bad Request (client can fix)
    ├── ConflictError      → 400 Bad Request (duplicate tag name)
    ├── UnauthorizedError  → 401 Unauthorized
    ├── NotFoundError      → 404 Not Found (absent OR owned by someone else)
    └── DatabaseError      → 500 Internal Server Error

The `message` is always safe to return to the client. The `context` dict is
logged server-side only.
"""

from typing import Any, Dict, Optional


class NotekeepError(Exception):
    """
    Base exception for all Notekeep application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotekeepError):
    """
    Raised when client input fails a business rule.

    When:    Missing tag name, unknown tag ids, explicit null on a
             non-nullable note field.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, unparseable reminder) are
    reported by FastAPI's RequestValidationError, which main.py also maps
    to 400.

    `details` is the client-facing part (field name plus anything passed
    in `details`); `context` stays server-side like every other error.

    Example response:
        {
            "error": "Tag name is required",
            "details": {"field": "name"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.details = dict(details or {})
        if field:
            self.details["field"] = field


class ConflictError(NotekeepError):
    """
    Raised when a write would break a per-user uniqueness rule.

    When:    Creating or renaming a tag to a name the caller already uses.
    HTTP:    400 Bad Request (the API has always reported duplicates as 400)
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(NotekeepError):
    """
    Raised by the session gate when no valid session accompanies a request.

    HTTP:    401 Unauthorized
    The response never says which check failed (missing header, bad
    signature, expired token); the reason goes to `context` for the audit log.
    """

    def __init__(
        self,
        reason: str = "missing_session",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(message="Unauthorized", context=ctx)
        self.reason = reason


class NotFoundError(NotekeepError):
    """
    Raised when a requested resource does not exist for the caller.

    When:    GET/PATCH/DELETE /api/notes/{id} or /api/tags/{id} where the row
             is missing or belongs to another user. Both cases produce the
             same message so a caller cannot discover other users' ids.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(NotekeepError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message is the generic per-operation text ("Failed to fetch notes").
    The original exception type and ids are kept in `context` and only
    ever logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
