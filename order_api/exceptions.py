"""
Order API Exception Hierarchy
=============================

What:  Application-specific exceptions and the storage error classifier.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       JSON responses with the matching HTTP status code.
Who:   Raised by the validator, the connection pool and the services.

Exception Hierarchy:
    OrderApiError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    └── StorageError      → 500 Internal Server Error (classified by `code`)

Storage classification (first match wins):
    sqlalchemy TimeoutError                → pool_exhausted
    builtin TimeoutError                   → connect_timeout
    IntegrityError                         → constraint_violation
    Operational/Interface/Disconnection,
    OSError                                → storage_unavailable
    any other SQLAlchemyError              → storage_error
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import exc as sa_exc


class OrderApiError(Exception):
    """
    Base exception for all Order API errors.

    Attributes:
        message:  Client-facing description
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OrderApiError):
    """
    Raised when a request body fails one or more field rules.

    Carries the full ordered list of violations; the handler in main.py
    renders them as ``{"errors": [{"field": ..., "message": ...}, ...]}``.
    """

    def __init__(
        self,
        violations: List[Any],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["fields"] = [v.field for v in violations]
        super().__init__(message=message, context=ctx)
        self.violations = list(violations)


class NotFoundError(OrderApiError):
    """
    Raised when a lookup by identifier matches no row.

    HTTP: 404 with ``{"message": <message>}``
    """

    def __init__(
        self,
        message: str = "Not found",
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(OrderApiError):
    """
    Raised when the connection pool or a statement fails.

    The ``code`` is the external classification; ``detail`` keeps the raw
    driver text for server-side logs (and for the optional legacy response
    field controlled by ``expose_storage_errors``).
    """

    code = "storage_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        detail: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.detail = detail


class PoolExhaustedError(StorageError):
    """No pooled connection became free within ``db_pool_timeout``."""

    code = "pool_exhausted"

    def __init__(self, detail: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The database is busy. Please try again later.",
            detail=detail,
            context=context,
        )


class ConnectTimeoutError(StorageError):
    """The driver could not open a connection within ``db_connect_timeout``."""

    code = "connect_timeout"

    def __init__(self, detail: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The database did not respond in time. Please try again later.",
            detail=detail,
            context=context,
        )


class ConstraintViolationError(StorageError):
    """A statement was rejected by a table constraint (duplicate key, FK, ...)."""

    code = "constraint_violation"

    def __init__(self, detail: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The request conflicts with existing data.",
            detail=detail,
            context=context,
        )


class StorageUnavailableError(StorageError):
    """The database could not be reached or dropped the connection."""

    code = "storage_unavailable"

    def __init__(self, detail: str = "", context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="The database is unavailable. Please try again later.",
            detail=detail,
            context=context,
        )


def classify_storage_error(
    exc: BaseException, context: Optional[Dict[str, Any]] = None
) -> StorageError:
    """Map a driver/pool failure onto one of the external storage error codes."""
    detail = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, StorageError):
        return exc
    if isinstance(exc, sa_exc.TimeoutError):
        return PoolExhaustedError(detail=detail, context=context)
    if isinstance(exc, TimeoutError):
        return ConnectTimeoutError(detail=detail, context=context)
    if isinstance(exc, sa_exc.IntegrityError):
        return ConstraintViolationError(detail=detail, context=context)
    if isinstance(
        exc,
        (
            sa_exc.OperationalError,
            sa_exc.InterfaceError,
            sa_exc.DisconnectionError,
            OSError,
        ),
    ):
        return StorageUnavailableError(detail=detail, context=context)
    return StorageError(detail=detail, context=context)
