"""
Tutorials API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the failure modes the service knows about.
Why:   Each exception maps to one HTTP status code in the global handlers
       (registered in main.py), so routes and services never build error
       responses by hand.
How:   Each exception class carries a message and optional context dict.
       The message is safe to return to clients; the context is logged only.

Exception Hierarchy:
    TutorialsError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── StoreUnavailableError    → 503 Service Unavailable / exit code 1 at boot
"""

from typing import Any, Dict, Optional


class TutorialsError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(TutorialsError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request. Schema-level problems (wrong JSON types) are still
    reported by FastAPI as 422.
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


class NotFoundError(TutorialsError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so the handler can answer 404.
    The message may be given verbatim; otherwise it is built from the resource.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TutorialsError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP: 500. The client always gets a generic message; the original
    error type is kept in context for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(TutorialsError):
    """
    Raised when the backing store cannot be reached.

    At boot:      raised by the startup connector once every retry is spent;
                  the entry point turns it into process exit code 1.
    At runtime:   HTTP 503 Service Unavailable.

    Attributes:
        attempts: Number of connection attempts made before giving up.
    """

    def __init__(
        self,
        message: str = "The database is unavailable",
        attempts: int = 1,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["attempts"] = attempts
        super().__init__(message=message, context=ctx)
        self.attempts = attempts
