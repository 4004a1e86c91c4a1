"""
Structured error types for dbspine.

Every failure raised by an adapter, the dialect layer or the change-set
builder is a :class:`DbSpineError` subclass carrying a category, a retry
hint and an :class:`ErrorContext` naming the operation, database and table
involved, so a caller can render a useful message without parsing text.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure domain
    - **Fail before I/O:** Validation errors are raised before any statement runs
    - **Rich Context:** operation / database / table travel with the error
    - **Error Chaining:** The driver exception is preserved as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        DbSpineError                           │
        │  (category, retryable, context, cause)                        │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ValidationError      ConfigError        TransientError       │
        │  (VALIDATION)         (CONFIG)           (retryable=True)     │
        │                                              │                │
        │                                     DatabaseConnectionError   │
        │                                                               │
        │  DatabaseError (DATABASE)                                     │
        │      │                                                        │
        │  QueryError   TransactionError   ContextSwitchError           │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = QueryError("relation does not exist")
    >>> error.with_context(operation="get_records", database="shop", table="public.orders")
    QueryError('relation does not exist', category=DATABASE)
    >>> error.context.table
    'public.orders'

Guardrails:
    ❌ DON'T: Raise bare ``Exception`` from adapter code
    ✅ DO: Raise the matching DbSpineError subclass with ``cause=``

    ❌ DON'T: Surface a context-restore failure instead of the original error
    ✅ DO: Log the restore failure and re-raise the original

Tags:
    error-handling, exception-hierarchy, error-context, dbspine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and display.

    Attributes:
        NETWORK: Connection refused, DNS, handshake failures
        DATABASE: Statement execution, transaction, context switch
        VALIDATION: Missing or malformed caller arguments
        CONFIG: Missing driver package, unknown scheme, bad settings
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    NETWORK = "NETWORK"
    DATABASE = "DATABASE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Typed fields cover what a database client needs to explain a failure
    (which operation, against which database and table, on which dialect);
    anything else goes into ``metadata``.

    Examples:
        >>> ctx = ErrorContext(operation="list_columns", database="shop")
        >>> ctx.to_dict()
        {'operation': 'list_columns', 'database': 'shop'}
    """

    operation: str | None = None
    database: str | None = None
    table: str | None = None
    dialect: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "database", "table", "dialect"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DbSpineError(Exception):
    """
    Base exception for all dbspine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so call
    sites only pass what differs from the domain default.

    Examples:
        >>> try:
        ...     raise OSError("socket closed")
        ... except OSError as e:
        ...     err = QueryError("SELECT failed", cause=e)
        >>> err.cause
        OSError('socket closed')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DbSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("Failed").with_context(
                operation="get_records",
                database="shop",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION / CONFIG (never retryable)
# =============================================================================


class ValidationError(DbSpineError):
    """
    A required argument is missing or malformed.

    Raised before any I/O; nothing needs cleaning up.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class ConfigError(DbSpineError):
    """Configuration error: unknown scheme, missing driver package."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


# =============================================================================
# TRANSIENT
# =============================================================================


class TransientError(DbSpineError):
    """Temporary failure that may succeed on retry."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class DatabaseConnectionError(TransientError):
    """Opening the handle or the liveness ping failed."""

    default_category = ErrorCategory.DATABASE


# =============================================================================
# DATABASE
# =============================================================================


class DatabaseError(DbSpineError):
    """Database statement or session error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class QueryError(DatabaseError):
    """Statement execution or row fetch failed."""

    pass


class TransactionError(DatabaseError):
    """
    A statement inside an atomic batch failed.

    The whole batch has been rolled back when this is raised.
    ``statement_index`` is the 0-based position of the failing statement.
    """

    def __init__(self, message: str, *, statement_index: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.statement_index = statement_index

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.statement_index is not None:
            result["statement_index"] = self.statement_index
        return result


class ContextSwitchError(DatabaseError):
    """Re-deriving or re-opening a database-scoped handle failed."""

    pass


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, DbSpineError):
        return error.retryable
    return isinstance(error, (ConnectionError, BrokenPipeError))


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DbSpineError",
    "ValidationError",
    "ConfigError",
    "TransientError",
    "DatabaseConnectionError",
    "DatabaseError",
    "QueryError",
    "TransactionError",
    "ContextSwitchError",
    "is_retryable",
]
