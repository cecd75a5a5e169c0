"""
PerkHub — Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the backend and the search view.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn backend
       exceptions into structured JSON error responses; the search view turns
       PerkFetchError into its inline error banner.

Exception Hierarchy:
    PerkHubError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── PerkFetchError           → client side only (view error banner)
"""

from typing import Any, Dict, Optional


class PerkHubError(Exception):
    """
    Base exception for all PerkHub application errors.

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


class ValidationError(PerkHubError):
    """
    Raised when client input breaks a business rule.

    When:    Blank title after trimming, unknown category, discount outside 0..100.
    HTTP:    400 Bad Request

    Schema-level problems (wrong types, missing fields) never get here;
    FastAPI rejects those with 422 before the service layer runs.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(PerkHubError):
    """
    Raised when a protected route is called without a valid bearer token.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(PerkHubError):
    """
    Raised when an authenticated user touches a perk they did not create.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to modify this perk",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PerkHubError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /api/perks/{id} with an unknown UUID.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    that into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(PerkHubError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details (SQL,
    constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PerkFetchError(PerkHubError):
    """
    The one error kind the Search-and-Filter view knows about: a failed
    GET /perks/all.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
                     request never produced one (connection refused, timeout).
    """

    DEFAULT_MESSAGE = "Failed to load perks"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message or self.DEFAULT_MESSAGE, context=ctx)
        self.status_code = status_code
