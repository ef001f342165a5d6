# ============================================================================
# CLAUDE CONTEXT - SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Core - DDL compilation from table schemas
# PURPOSE: Compile dialect-neutral table schemas to dialect-specific DDL
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.schema.dialects import (
    DEFAULT_GUID,
    SQLDialect,
    SQLiteDialect,
    PostgreSQLDialect,
    MSSQLDialect,
    get_dialect,
    is_already_exists_error,
)
from core.schema.compiler import DDLCompiler, COLUMN_SEPARATOR

__all__ = [
    # Compiler
    "DDLCompiler",
    "COLUMN_SEPARATOR",
    # Dialects
    "DEFAULT_GUID",
    "SQLDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MSSQLDialect",
    "get_dialect",
    "is_already_exists_error",
]
