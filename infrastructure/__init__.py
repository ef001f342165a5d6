# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Infrastructure - Connections, execution and schema application
# PURPOSE: Apply compiled DDL against live SQLite / PostgreSQL connections
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module.

Provides:
- Connection providers: one live connection, explicit lifecycle state
- Statement executors: run one statement, wrap driver errors as EngineError
- SchemaApplier / AsyncSchemaApplier: sequential, fail-fast table creation

Usage:
    from infrastructure import SQLiteConnectionProvider, SchemaApplier
    from core.config import DatabaseSettings
    from core.models import SchemaDefinition

    provider = SQLiteConnectionProvider(DatabaseSettings(sqlite_file_path="book.db"))
    provider.connect()

    schema = SchemaDefinition.from_file("schemas/bookstore.json")
    result = SchemaApplier(provider).create_tables(schema)
"""

from infrastructure.executors import (
    ExecutionSummary,
    StatementExecutor,
    AsyncStatementExecutor,
    SQLiteStatementExecutor,
    PostgreSQLStatementExecutor,
    AsyncPostgreSQLStatementExecutor,
)
from infrastructure.connection import (
    ConnectionProvider,
    AsyncConnectionProvider,
    SQLiteConnectionProvider,
    PostgreSQLConnectionProvider,
    AsyncPostgreSQLConnectionProvider,
    create_connection_provider,
)
from infrastructure.schema_applier import (
    SchemaApplier,
    AsyncSchemaApplier,
    ApplyResult,
    TableResult,
)

__all__ = [
    # Executors
    'ExecutionSummary',
    'StatementExecutor',
    'AsyncStatementExecutor',
    'SQLiteStatementExecutor',
    'PostgreSQLStatementExecutor',
    'AsyncPostgreSQLStatementExecutor',
    # Connections
    'ConnectionProvider',
    'AsyncConnectionProvider',
    'SQLiteConnectionProvider',
    'PostgreSQLConnectionProvider',
    'AsyncPostgreSQLConnectionProvider',
    'create_connection_provider',
    # Schema application
    'SchemaApplier',
    'AsyncSchemaApplier',
    'ApplyResult',
    'TableResult',
]
