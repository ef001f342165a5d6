# ============================================================================
# CLAUDE CONTEXT - BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Foundation - Core enums shared by compiler, connections and applier
# PURPOSE: Define column types, dialects and lifecycle states
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ColumnType, Dialect, ConnectionState, CreateOutcome, SchemaErrorReason
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema DDL system.

These enums cross every boundary:
- Schema documents (DataType strings)
- DDL compilation (type mapping keys)
- Table creation (outcomes, connection states)
"""

from enum import Enum
from typing import Optional


# ============================================================================
# COLUMN TYPES
# ============================================================================

class ColumnType(str, Enum):
    """
    Abstract column types of a table schema.

    Values are the DataType strings used by schema documents.
    """
    IDENTITY = "ID"              # Auto-increment primary key
    GUID = "GUID"                # Fixed-format identifier string
    FOREIGN_KEY = "ForeignKey"   # Integer reference, default 0
    NUMERIC = "Numeric"          # Integer, default 0
    DECIMAL = "Decimal"          # Fixed precision real, Size "P,S"
    STRING = "String"            # Bounded text, Size is the length
    TEXT = "Text"                # Unbounded text
    DATETIME = "DateTime"        # Timestamp (text or native)
    BOOLEAN = "Boolean"          # 0/1 integer

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _COLUMN_TYPE_ALIASES.get(value)
        return None

    @classmethod
    def parse(cls, value: str) -> Optional["ColumnType"]:
        """Resolve a DataType string, returning None when unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return None

    def requires_size(self) -> bool:
        """Check if the type needs a Size attribute."""
        return self in (ColumnType.DECIMAL, ColumnType.STRING)

    def is_key_marker(self) -> bool:
        """Check if the type marks a key column (identity or reference)."""
        return self in (ColumnType.IDENTITY, ColumnType.FOREIGN_KEY)


# Exact, case-sensitive alternate spellings accepted in documents
_COLUMN_TYPE_ALIASES = {
    "Identity": ColumnType.IDENTITY,
    "Guid": ColumnType.GUID,
}


# ============================================================================
# DIALECTS
# ============================================================================

class Dialect(str, Enum):
    """Target SQL dialects."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MSSQL = "mssql"


# ============================================================================
# LIFECYCLE STATES
# ============================================================================

class ConnectionState(str, Enum):
    """
    Connection lifecycle states.

    State transitions:
        DISCONNECTED -> CONNECTING -> CONNECTED
                                   -> DISCONNECTED (connect failed)

    There is no reconnection and no transition out of CONNECTED.
    """
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class CreateOutcome(str, Enum):
    """
    Outcome of applying one CREATE TABLE statement.

    With IF NOT EXISTS the engine succeeds whether or not the table was
    already there, so CREATED then means "created or already present"
    (TableResult.guarded). ALREADY_EXISTS is only reported for unguarded
    statements whose engine error was classified as benign.
    """
    CREATED = "created"                 # Or already present when guarded
    ALREADY_EXISTS = "already_exists"   # Benign, absorbed
    PLANNED = "planned"                 # Dry run, nothing executed


class SchemaErrorReason(str, Enum):
    """Reasons a schema document or table is rejected."""
    INVALID_DOCUMENT = "invalid_document"
    EMPTY_TABLE = "empty_table"
    EMPTY_NAME = "empty_name"
    DUPLICATE_TABLE = "duplicate_table"
    DUPLICATE_COLUMN = "duplicate_column"
    MISSING_SIZE = "missing_size"
    INVALID_SIZE = "invalid_size"
    MULTIPLE_PRIMARY_KEYS = "multiple_primary_keys"
    UNKNOWN_TYPE = "unknown_type"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ColumnType",
    "Dialect",
    "ConnectionState",
    "CreateOutcome",
    "SchemaErrorReason",
]
