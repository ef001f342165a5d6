# ============================================================================
# CLAUDE CONTEXT - ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Schema, connection, creation and engine errors with context
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DDLError, SchemaError, StoreConnectionError, NotConnectedError,
#          AlreadyConnectedError, ConnectFailedError, CreateError,
#          CreateErrorKind, EngineError
# ============================================================================
"""
Error taxonomy for DDL compilation and schema application.

- SchemaError: malformed schema input, raised before any execution
- StoreConnectionError: connection lifecycle violations
- CreateError: a CREATE TABLE failed fatally (table, DDL and cause attached)
- EngineError: opaque passthrough of a storage driver failure
"""

from enum import Enum
from typing import Any, Optional, Sequence

from core.contracts import SchemaErrorReason


class DDLError(Exception):
    """Base exception for all schema DDL operations."""


# ============================================================================
# SCHEMA ERRORS
# ============================================================================

class SchemaError(DDLError):
    """Raised when a schema document, table or column is malformed."""

    def __init__(
        self,
        message: str,
        reason: SchemaErrorReason,
        table: str = None,
        column: str = None,
    ):
        self.reason = reason
        self.table = table
        self.column = column
        super().__init__(message)


# ============================================================================
# CONNECTION ERRORS
# ============================================================================

class StoreConnectionError(DDLError):
    """Base exception for connection lifecycle errors."""

    reason = "connection_error"


class NotConnectedError(StoreConnectionError):
    """Raised when an operation needs a connection that is not established."""

    reason = "not_connected"


class AlreadyConnectedError(StoreConnectionError):
    """
    Raised on a second connect attempt.

    Non-fatal: the existing handle is attached for reuse.
    """

    reason = "already_connected"

    def __init__(self, message: str, handle: Any = None):
        self.handle = handle
        super().__init__(message)


class ConnectFailedError(StoreConnectionError):
    """Raised when the underlying driver cannot open a connection."""

    reason = "connect_failed"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


# ============================================================================
# ENGINE ERRORS
# ============================================================================

class EngineError(DDLError):
    """
    Failure reported by the storage engine while running a statement.

    Attributes mirror what drivers expose so dialect predicates can
    classify without touching driver types:
        code: Vendor error number or name (e.g. 2714, "SQLITE_ERROR")
        sqlstate: SQLSTATE code when the driver provides one (e.g. "42P07")
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        code: Any = None,
        sqlstate: Optional[str] = None,
    ):
        self.cause = cause
        self.code = code
        self.sqlstate = sqlstate
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "EngineError":
        """Wrap a driver exception, keeping any code/sqlstate it carries."""
        code = getattr(exc, "sqlite_errorname", None)
        if code is None and getattr(exc, "args", None):
            first = exc.args[0]
            if isinstance(first, int):
                code = first
        return cls(
            str(exc),
            cause=exc,
            code=code,
            sqlstate=getattr(exc, "sqlstate", None),
        )


# ============================================================================
# CREATE ERRORS
# ============================================================================

class CreateErrorKind(str, Enum):
    """Classification of a failed CREATE TABLE."""
    ALREADY_EXISTS = "already_exists"   # Absorbed, never surfaced
    OTHER = "other"


class CreateError(DDLError):
    """
    Raised when creating a table fails fatally.

    Carries enough context to diagnose without re-deriving it:
        table: Name of the failing table
        ddl: Statement that was attempted
        cause: Underlying EngineError
        index: 0-based position of the table within the schema
        completed: Results for the tables applied before the failure
    """

    def __init__(
        self,
        table: str,
        ddl: str,
        cause: Optional[BaseException] = None,
        index: Optional[int] = None,
        completed: Sequence[Any] = (),
        kind: CreateErrorKind = CreateErrorKind.OTHER,
    ):
        self.table = table
        self.ddl = ddl
        self.cause = cause
        self.index = index
        self.completed = list(completed)
        self.kind = kind

        position = f" (index {index})" if index is not None else ""
        super().__init__(f"CREATE TABLE {table}{position} failed: {cause}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DDLError",
    "SchemaError",
    "StoreConnectionError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "ConnectFailedError",
    "EngineError",
    "CreateErrorKind",
    "CreateError",
]
