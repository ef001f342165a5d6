# ============================================================================
# CLAUDE CONTEXT - DDL COMPILER
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Core - Table schema to CREATE/DROP statements
# PURPOSE: Deterministic, side-effect free DDL generation for one dialect
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DDLCompiler, COLUMN_SEPARATOR
# DEPENDENCIES: core.schema.dialects
# ============================================================================
"""
DDL Compiler.

Compiles dialect-neutral TableDefinitions into CREATE TABLE statements and
table names into guarded DROP TABLE statements. No I/O: the same table and
dialect always produce byte-identical text.

Statement shape:

    CREATE TABLE IF NOT EXISTS "Book"
        (
            "IDBook" INTEGER PRIMARY KEY AUTOINCREMENT,
            "Title" VARCHAR(256) NOT NULL DEFAULT ''
        );

The IF NOT EXISTS guard is only emitted for dialects that support it.
Elsewhere idempotency comes from the applier classifying the engine's
"already exists" error.

Usage:
    compiler = DDLCompiler(Dialect.SQLITE)
    ddl = compiler.compile_create_table(table)
"""

import logging
from typing import List, Optional

from core.contracts import ColumnType, Dialect, SchemaErrorReason
from core.errors import SchemaError
from core.models.schema import SchemaDefinition, TableDefinition
from core.schema.dialects import SQLDialect, get_dialect

logger = logging.getLogger(__name__)

COLUMN_SEPARATOR = ",\n"
_COLUMN_INDENT = "        "


class DDLCompiler:
    """
    Compile table schemas to DDL for a single dialect.

    Args:
        dialect: Target dialect (enum, name, or SQLDialect instance)
        use_if_not_exists: Emit IF NOT EXISTS on CREATE TABLE. None uses the
            dialect's native support; False forces the unguarded form.
    """

    def __init__(self, dialect=Dialect.SQLITE, use_if_not_exists: Optional[bool] = None):
        self.sql_dialect: SQLDialect = get_dialect(dialect)
        self.dialect: Dialect = self.sql_dialect.dialect
        if use_if_not_exists is None:
            use_if_not_exists = self.sql_dialect.supports_if_not_exists
        self.use_if_not_exists = use_if_not_exists and self.sql_dialect.supports_if_not_exists

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_table(self, table: TableDefinition) -> None:
        """
        Check a table is compilable.

        Raises:
            SchemaError: EMPTY_NAME, EMPTY_TABLE, DUPLICATE_COLUMN,
                MULTIPLE_PRIMARY_KEYS, UNKNOWN_TYPE, MISSING_SIZE, INVALID_SIZE
        """
        if not (table.name or "").strip():
            raise SchemaError(
                "Table name must not be empty",
                reason=SchemaErrorReason.EMPTY_NAME,
            )

        if not table.columns:
            raise SchemaError(
                f"Table {table.name} has no columns",
                reason=SchemaErrorReason.EMPTY_TABLE,
                table=table.name,
            )

        seen = set()
        identities = []
        for column in table.columns:
            if not (column.name or "").strip():
                raise SchemaError(
                    f"Table {table.name} has a column with an empty name",
                    reason=SchemaErrorReason.EMPTY_NAME,
                    table=table.name,
                )
            if column.name in seen:
                raise SchemaError(
                    f"Table {table.name} defines column {column.name} more than once",
                    reason=SchemaErrorReason.DUPLICATE_COLUMN,
                    table=table.name,
                    column=column.name,
                )
            seen.add(column.name)

            # Renders the type so unknown types and bad sizes fail here
            self.sql_dialect.column_type(column, table.name)

            if column.data_type == ColumnType.IDENTITY:
                identities.append(column.name)

        if len(identities) > 1:
            raise SchemaError(
                f"Table {table.name} has more than one primary key column: {identities}",
                reason=SchemaErrorReason.MULTIPLE_PRIMARY_KEYS,
                table=table.name,
                column=identities[1],
            )

    def validate_schema(self, schema: SchemaDefinition) -> None:
        """
        Check every table of a schema, plus table name uniqueness.

        An empty schema is valid and compiles to no statements.
        """
        seen = set()
        for table in schema.tables:
            self.validate_table(table)
            if table.name in seen:
                raise SchemaError(
                    f"Schema defines table {table.name} more than once",
                    reason=SchemaErrorReason.DUPLICATE_TABLE,
                    table=table.name,
                )
            seen.add(table.name)

    # =========================================================================
    # STATEMENT GENERATION
    # =========================================================================

    def compile_create_table(self, table: TableDefinition) -> str:
        """
        Generate the CREATE TABLE statement for one table.

        Args:
            table: Table definition (columns compiled in order)

        Returns:
            DDL text terminated by a semicolon

        Raises:
            SchemaError: If the table fails validation
        """
        self.validate_table(table)

        clauses = [
            f"{_COLUMN_INDENT}{self.sql_dialect.column_clause(column, table.name)}"
            for column in table.columns
        ]

        statement = (
            f"{self.sql_dialect.create_table_head(table.name, self.use_if_not_exists)}\n"
            f"    (\n"
            f"{COLUMN_SEPARATOR.join(clauses)}\n"
            f"    );"
        )

        logger.debug(f"Generated {self.dialect.value} CREATE TABLE for {table.name}:\n{statement}")
        return statement

    def compile_drop_table(self, table_name: str) -> str:
        """
        Generate a DROP TABLE statement guarded by an existence check.

        Raises:
            SchemaError: If the table name is empty
        """
        if not (table_name or "").strip():
            raise SchemaError(
                "Table name must not be empty",
                reason=SchemaErrorReason.EMPTY_NAME,
            )
        return self.sql_dialect.drop_table(table_name)

    def compile_schema(self, schema: SchemaDefinition) -> List[str]:
        """
        Validate a whole schema, then compile every table in order.

        Returns:
            List of CREATE TABLE statements, one per table
        """
        self.validate_schema(schema)
        statements = [self.compile_create_table(table) for table in schema.tables]
        logger.info(f"Generated {len(statements)} {self.dialect.value} CREATE TABLE statements")
        return statements

    def compile_drop_schema(self, schema: SchemaDefinition) -> List[str]:
        """DROP statements for every table, children before parents."""
        return [self.compile_drop_table(table.name) for table in reversed(schema.tables)]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["DDLCompiler", "COLUMN_SEPARATOR"]
