# ============================================================================
# CLAUDE CONTEXT - CORE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors, schema models and the DDL compiler
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    ColumnType,
    Dialect,
    ConnectionState,
    CreateOutcome,
    SchemaErrorReason,
)
from core.errors import (
    DDLError,
    SchemaError,
    StoreConnectionError,
    NotConnectedError,
    AlreadyConnectedError,
    ConnectFailedError,
    EngineError,
    CreateError,
    CreateErrorKind,
)
from core.models import ColumnDefinition, TableDefinition, SchemaDefinition
from core.schema import DDLCompiler, get_dialect, is_already_exists_error

__all__ = [
    # Enums
    "ColumnType",
    "Dialect",
    "ConnectionState",
    "CreateOutcome",
    "SchemaErrorReason",
    # Errors
    "DDLError",
    "SchemaError",
    "StoreConnectionError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "ConnectFailedError",
    "EngineError",
    "CreateError",
    "CreateErrorKind",
    # Models
    "ColumnDefinition",
    "TableDefinition",
    "SchemaDefinition",
    # Schema
    "DDLCompiler",
    "get_dialect",
    "is_already_exists_error",
]
