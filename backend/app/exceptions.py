"""
Quizo Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every error the API can report.
Why:   Each exception maps to one HTTP status code and a stable error code,
       so routes stay free of status-code plumbing.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by the database gateway, services, middleware and routes.

Exception Hierarchy:
    QuizoError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthError                → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── StoreUnavailableError    → 500 Internal Server Error (store unreachable)
    └── DatabaseError            → 500 Internal Server Error (statement failed)

`message` is safe to return to the client; `context` is logged only.
"""

from typing import Any, Dict, Optional


class QuizoError(Exception):
    """
    Base exception for all Quizo application errors.

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


class ValidationError(QuizoError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request
    When:    Missing or empty required fields, non-positive or non-numeric ids.
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


class AuthError(QuizoError):
    """
    Raised when a username/password pair matches no user.

    HTTP:    401 Unauthorized
    The message is identical for an unknown username and a wrong password,
    so the response never reveals which usernames exist.
    """

    def __init__(
        self,
        message: str = "Invalid credentials.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(QuizoError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found
    SQLAlchemy returns None (or zero rows) for missing records; services turn
    that into this exception so routes never inspect query results.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreUnavailableError(QuizoError):
    """
    Raised when the relational store cannot be reached.

    HTTP:    500 Internal Server Error
    When:    Connection refused, pool checkout timeout, connection dropped.
    Never retried automatically; the client decides whether to try again.
    """

    def __init__(
        self,
        message: str = "The data store is currently unavailable.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(QuizoError):
    """
    Raised when a statement reaches the store but fails.

    HTTP:    500 Internal Server Error
    Security Note:
        SQL text, constraint names and driver messages go to the server log
        via `context`, never into the response.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(QuizoError):
    """
    Raised when a client exceeds the per-IP request quota.

    HTTP:    429 Too Many Requests
    The message is fixed; retry_after feeds the Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(
            message="Too many requests, please try again later.", context=ctx
        )
        self.retry_after = retry_after
