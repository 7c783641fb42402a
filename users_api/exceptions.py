"""
Users API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the three failure classes of the API.
Why:   Routes and services raise these; global handlers in main.py turn them
       into `{"error": message}` bodies with the right status code.
How:   Each exception carries a client-safe message, an HTTP status and an
       optional context dict that is logged but never returned.

Exception Hierarchy:
    UsersApiError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found ("User not found")
    └── DatabaseError     → 500 Internal Server Error (detail logged only)
"""

from typing import Any, Dict, Optional


class UsersApiError(Exception):
    """
    Base exception for all Users API errors.

    Attributes:
        message:      User-facing error description (returned as `error`)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UsersApiError):
    """
    Raised when a request body fails a field rule.

    The message is the exact text the client receives, e.g.
    "Invalid email address". `field` names the offending field when there
    is exactly one.
    """

    status_code = 400

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


class NotFoundError(UsersApiError):
    """
    Raised when the referenced user row does not exist.

    The client always sees the fixed message "User not found"; the id that
    was asked for goes into the context for the logs.
    """

    status_code = 404

    def __init__(
        self,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message="User not found", context=ctx)


class DatabaseError(UsersApiError):
    """
    Raised when a store operation fails.

    Covers connection failures, constraint violations (duplicate username
    or email) and anything else the driver raises. The message returned to
    the client is always the generic one; the original exception is logged
    by the persistence layer before this is raised.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
