# ============================================================================
# CLAUDE CONTEXT - SQL DIALECTS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Core - Per-dialect type mapping and error classification
# PURPOSE: Column type syntax, identifier quoting, DROP form, already-exists predicate
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SQLDialect, SQLiteDialect, PostgreSQLDialect, MSSQLDialect,
#          get_dialect, is_already_exists_error, DEFAULT_GUID
# DEPENDENCIES: psycopg
# ============================================================================
"""
SQL Dialects - Everything Engine-Specific Lives Here.

Supporting a new storage engine means adding one SQLDialect subclass:
a TYPE_MAP for the nine column types plus is_already_exists_error().

Type map templates accept these fields:
    {length}     String size
    {precision}  Decimal precision
    {scale}      Decimal scale (0 when Size is a bare precision)

Usage:
    from core.schema.dialects import get_dialect
    from core.contracts import Dialect

    dialect = get_dialect(Dialect.SQLITE)
    clause = dialect.column_clause(column)
"""

import re
from typing import Dict, Optional, Tuple

from psycopg import sql

from core.contracts import ColumnType, Dialect, SchemaErrorReason
from core.errors import SchemaError
from core.models.schema import ColumnDefinition


DEFAULT_GUID = "00000000-0000-0000-0000-000000000000"

_DECIMAL_SIZE = re.compile(r"^\s*(\d+)\s*(?:,\s*(\d+)\s*)?$")


# ============================================================================
# SIZE PARSING
# ============================================================================

def parse_string_length(column: ColumnDefinition, table: Optional[str] = None) -> int:
    """Parse a String column's Size into a positive length."""
    size = (column.size or "").strip()
    if not size.isdecimal() or int(size) < 1:
        raise SchemaError(
            f"Column {column.name} has invalid String size {column.size!r}; "
            f"expected a positive integer",
            reason=SchemaErrorReason.INVALID_SIZE,
            table=table,
            column=column.name,
        )
    return int(size)


def parse_decimal_size(column: ColumnDefinition, table: Optional[str] = None) -> Tuple[int, int]:
    """Parse a Decimal column's Size ("P,S" or "P") into (precision, scale)."""
    match = _DECIMAL_SIZE.match(column.size or "")
    if match:
        precision = int(match.group(1))
        scale = int(match.group(2) or 0)
        if precision >= 1 and scale <= precision:
            return precision, scale
    raise SchemaError(
        f"Column {column.name} has invalid Decimal size {column.size!r}; "
        f"expected \"precision,scale\" with scale <= precision",
        reason=SchemaErrorReason.INVALID_SIZE,
        table=table,
        column=column.name,
    )


# ============================================================================
# BASE DIALECT
# ============================================================================

class SQLDialect:
    """
    Base class for SQL dialects.

    Subclasses provide TYPE_MAP, quoting and the already-exists predicate.
    """

    dialect: Dialect
    supports_if_not_exists: bool = True
    TYPE_MAP: Dict[ColumnType, str] = {}

    def quote_identifier(self, name: str) -> str:
        return '"' + name.replace('"', '""') + '"'

    def table_reference(self, table_name: str) -> str:
        """Quoted (and schema-qualified, where the dialect needs it) table name."""
        return self.quote_identifier(table_name)

    def column_type(self, column: ColumnDefinition, table: Optional[str] = None) -> str:
        """
        Render the type and constraint fragment for one column.

        Raises:
            SchemaError: UNKNOWN_TYPE when the type has no mapping,
                MISSING_SIZE / INVALID_SIZE for sized types
        """
        data_type = column.data_type
        template = self.TYPE_MAP.get(data_type) if isinstance(data_type, ColumnType) else None
        if template is None:
            raise SchemaError(
                f"Column {column.name} has unrecognised type {data_type!r} "
                f"for dialect {self.dialect.value}",
                reason=SchemaErrorReason.UNKNOWN_TYPE,
                table=table,
                column=column.name,
            )

        if data_type.requires_size() and not (column.size or "").strip():
            raise SchemaError(
                f"Column {column.name} of type {data_type.value} requires a Size",
                reason=SchemaErrorReason.MISSING_SIZE,
                table=table,
                column=column.name,
            )

        if data_type == ColumnType.STRING:
            return template.format(length=parse_string_length(column, table))
        if data_type == ColumnType.DECIMAL:
            precision, scale = parse_decimal_size(column, table)
            return template.format(precision=precision, scale=scale)
        return template

    def column_clause(self, column: ColumnDefinition, table: Optional[str] = None) -> str:
        return f"{self.quote_identifier(column.name)} {self.column_type(column, table)}"

    def create_table_head(self, table_name: str, if_not_exists: bool) -> str:
        guard = "IF NOT EXISTS " if if_not_exists and self.supports_if_not_exists else ""
        return f"CREATE TABLE {guard}{self.table_reference(table_name)}"

    def drop_table(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {self.table_reference(table_name)};"

    def is_already_exists_error(self, error: BaseException) -> bool:
        raise NotImplementedError

    def list_tables_query(self) -> str:
        """Query returning one row per table, table name in the first column."""
        raise NotImplementedError


# ============================================================================
# SQLITE
# ============================================================================

class SQLiteDialect(SQLDialect):
    """SQLite: type affinity, timestamps stored as ISO-8601 text."""

    dialect = Dialect.SQLITE
    supports_if_not_exists = True

    TYPE_MAP = {
        ColumnType.IDENTITY: "INTEGER PRIMARY KEY AUTOINCREMENT",
        ColumnType.GUID: f"VARCHAR(36) DEFAULT '{DEFAULT_GUID}'",
        ColumnType.FOREIGN_KEY: "INTEGER NOT NULL DEFAULT 0",
        ColumnType.NUMERIC: "INTEGER NOT NULL DEFAULT 0",
        ColumnType.DECIMAL: "DECIMAL({precision},{scale})",
        ColumnType.STRING: "VARCHAR({length}) NOT NULL DEFAULT ''",
        ColumnType.TEXT: "TEXT",
        ColumnType.DATETIME: "TEXT",
        ColumnType.BOOLEAN: "INTEGER NOT NULL DEFAULT 0",
    }

    _ALREADY_EXISTS = re.compile(r"table\s+.+?\s+already exists", re.IGNORECASE)

    def is_already_exists_error(self, error: BaseException) -> bool:
        return bool(self._ALREADY_EXISTS.search(str(error)))

    def list_tables_query(self) -> str:
        return (
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )


# ============================================================================
# POSTGRESQL
# ============================================================================

class PostgreSQLDialect(SQLDialect):
    """PostgreSQL: identifiers composed with psycopg.sql, native timestamps."""

    dialect = Dialect.POSTGRESQL
    supports_if_not_exists = True

    TYPE_MAP = {
        ColumnType.IDENTITY: "SERIAL PRIMARY KEY",
        ColumnType.GUID: f"VARCHAR(36) DEFAULT '{DEFAULT_GUID}'",
        ColumnType.FOREIGN_KEY: "INTEGER NOT NULL DEFAULT 0",
        ColumnType.NUMERIC: "INTEGER NOT NULL DEFAULT 0",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.STRING: "VARCHAR({length}) NOT NULL DEFAULT ''",
        ColumnType.TEXT: "TEXT",
        ColumnType.DATETIME: "TIMESTAMPTZ",
        ColumnType.BOOLEAN: "SMALLINT NOT NULL DEFAULT 0",
    }

    DUPLICATE_TABLE_SQLSTATE = "42P07"
    _ALREADY_EXISTS = re.compile(r'relation\s+"[^"]+"\s+already exists', re.IGNORECASE)

    def quote_identifier(self, name: str) -> str:
        return sql.Identifier(name).as_string(None)

    def drop_table(self, table_name: str) -> str:
        return sql.SQL("DROP TABLE IF EXISTS {};").format(
            sql.Identifier(table_name)
        ).as_string(None)

    def is_already_exists_error(self, error: BaseException) -> bool:
        if getattr(error, "sqlstate", None) == self.DUPLICATE_TABLE_SQLSTATE:
            return True
        return bool(self._ALREADY_EXISTS.search(str(error)))

    def list_tables_query(self) -> str:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema() AND table_type = 'BASE TABLE' "
            "ORDER BY table_name"
        )


# ============================================================================
# SQL SERVER
# ============================================================================

class MSSQLDialect(SQLDialect):
    """
    SQL Server: bracket quoting under [dbo], no CREATE TABLE IF NOT EXISTS.

    Idempotent creation relies on classifying error 2714.
    """

    dialect = Dialect.MSSQL
    supports_if_not_exists = False
    SCHEMA = "dbo"

    TYPE_MAP = {
        ColumnType.IDENTITY: "INT NOT NULL IDENTITY PRIMARY KEY",
        ColumnType.GUID: f"VARCHAR(254) DEFAULT '{DEFAULT_GUID}'",
        ColumnType.FOREIGN_KEY: "INT NOT NULL DEFAULT 0",
        ColumnType.NUMERIC: "INT NOT NULL DEFAULT 0",
        ColumnType.DECIMAL: "DECIMAL({precision},{scale})",
        ColumnType.STRING: "VARCHAR({length}) NOT NULL DEFAULT ''",
        ColumnType.TEXT: "TEXT",
        ColumnType.DATETIME: "DATETIME",
        ColumnType.BOOLEAN: "TINYINT NOT NULL DEFAULT 0",
    }

    OBJECT_EXISTS_ERROR = 2714

    def quote_identifier(self, name: str) -> str:
        return "[" + name.replace("]", "]]") + "]"

    def table_reference(self, table_name: str) -> str:
        return f"{self.quote_identifier(self.SCHEMA)}.{self.quote_identifier(table_name)}"

    def drop_table(self, table_name: str) -> str:
        object_name = f"{self.SCHEMA}.{self.quote_identifier(table_name)}".replace("'", "''")
        return (
            f"IF OBJECT_ID('{object_name}', 'U') IS NOT NULL "
            f"DROP TABLE {self.table_reference(table_name)};"
        )

    def is_already_exists_error(self, error: BaseException) -> bool:
        if getattr(error, "code", None) == self.OBJECT_EXISTS_ERROR:
            return True
        message = str(error)
        return "There is already an object named" in message and "in the database" in message

    def list_tables_query(self) -> str:
        return (
            "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
            f"WHERE TABLE_SCHEMA = '{self.SCHEMA}' AND TABLE_TYPE = 'BASE TABLE' "
            "ORDER BY TABLE_NAME"
        )


# ============================================================================
# REGISTRY
# ============================================================================

_DIALECTS: Dict[Dialect, SQLDialect] = {
    Dialect.SQLITE: SQLiteDialect(),
    Dialect.POSTGRESQL: PostgreSQLDialect(),
    Dialect.MSSQL: MSSQLDialect(),
}


def get_dialect(dialect) -> SQLDialect:
    """
    Look up a dialect by enum member or name.

    Raises:
        ValueError: If the dialect is not supported
    """
    if isinstance(dialect, SQLDialect):
        return dialect
    try:
        return _DIALECTS[Dialect(dialect)]
    except (ValueError, KeyError):
        supported = ", ".join(d.value for d in _DIALECTS)
        raise ValueError(f"Unsupported dialect {dialect!r}; expected one of: {supported}")


def is_already_exists_error(error: BaseException, dialect) -> bool:
    """True when error is the dialect's benign 'table already exists' failure."""
    return get_dialect(dialect).is_already_exists_error(error)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_GUID",
    "SQLDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MSSQLDialect",
    "get_dialect",
    "is_already_exists_error",
    "parse_string_length",
    "parse_decimal_size",
]
