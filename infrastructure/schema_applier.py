# ============================================================================
# SCHEMA APPLIER - TABLE CREATION ORCHESTRATOR
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Infrastructure - Schema application orchestrator
# PURPOSE: Create every table of a schema, in order, on a live connection
# CREATED: 19 OCT 2026
# ============================================================================
"""
SchemaApplier - Sequential, Fail-Fast, Idempotent Table Creation.

Workflow for create_tables():
1. Connection guard (NotConnectedError, nothing executed)
2. Whole-schema validation (SchemaError, nothing executed)
3. For each table, in schema order, one at a time:
   compile CREATE TABLE -> execute -> classify the outcome
4. Aggregate ApplyResult

Outcome classification per table:
- success                              -> CREATED
- engine error, dialect "already exists" -> ALREADY_EXISTS (benign)
- any other engine error               -> CreateError, run stops

Table order encodes foreign key order, so there is never more than one
statement in flight. Tables created before a failure stay created; the
CreateError says which table failed, at which index, and which tables were
completed.

Usage:
    provider = SQLiteConnectionProvider(DatabaseSettings(sqlite_file_path="book.db"))
    provider.connect()

    applier = SchemaApplier(provider)
    result = applier.create_tables(schema)

    # Dry run (compile only, no connection needed)
    result = applier.create_tables(schema, dry_run=True)

    # Async
    applier = AsyncSchemaApplier(async_provider)
    result = await applier.create_tables(schema)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.config.settings import ApplierSettings
from core.contracts import CreateOutcome
from core.errors import CreateError, EngineError, NotConnectedError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.schema import SchemaDefinition, TableDefinition
from core.schema.compiler import DDLCompiler

logger = get_logger(__name__, ComponentType.APPLIER)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class TableResult:
    """
    Result of applying one table.

    guarded is True when the statement carried IF NOT EXISTS. The engine
    reports no difference between creating such a table and finding it
    already there, so a guarded CREATED means "created or already present".
    """
    table: str
    index: int
    outcome: CreateOutcome
    ddl: str
    elapsed_ms: float = 0.0
    message: str = ""
    guarded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "index": self.index,
            "outcome": self.outcome.value,
            "guarded": self.guarded,
            "elapsed_ms": self.elapsed_ms,
            "message": self.message,
        }


@dataclass
class ApplyResult:
    """Aggregate result of applying a schema."""
    dialect: str
    timestamp: str
    success: bool
    dry_run: bool = False
    tables: List[TableResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    verification: Optional[Dict[str, List[str]]] = None

    @property
    def statements(self) -> List[str]:
        return [t.ddl for t in self.tables]

    def tables_with(self, outcome: CreateOutcome) -> List[str]:
        return [t.table for t in self.tables if t.outcome == outcome]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dialect": self.dialect,
            "timestamp": self.timestamp,
            "success": self.success,
            "dry_run": self.dry_run,
            "tables": [t.to_dict() for t in self.tables],
            "warnings": self.warnings,
            "verification": self.verification,
            "summary": {
                "total_tables": len(self.tables),
                "created": len(self.tables_with(CreateOutcome.CREATED)),
                "already_existed": len(self.tables_with(CreateOutcome.ALREADY_EXISTS)),
                "planned": len(self.tables_with(CreateOutcome.PLANNED)),
                "guarded": len([t for t in self.tables if t.guarded]),
            },
        }


# ============================================================================
# SHARED LOGIC
# ============================================================================

class _SchemaApplierBase:
    """Compilation, guards and outcome classification shared by both appliers."""

    def __init__(
        self,
        connection,
        compiler: Optional[DDLCompiler] = None,
        executor=None,
        use_if_not_exists: Optional[bool] = None,
        settings: Optional[ApplierSettings] = None,
    ):
        """
        Args:
            connection: Connection provider (connected flag, executor(), list_tables())
            compiler: DDL compiler; defaults to one for the connection's dialect
            executor: Statement executor override; defaults to connection.executor()
            use_if_not_exists: Override the IF NOT EXISTS guard (None = settings/dialect)
            settings: Reporting options
        """
        self.connection = connection
        if compiler is None:
            if use_if_not_exists is None:
                db_settings = getattr(connection, "settings", None)
                use_if_not_exists = getattr(db_settings, "use_if_not_exists", None)
            compiler = DDLCompiler(connection.dialect, use_if_not_exists=use_if_not_exists)
        self.compiler = compiler
        self.dialect = compiler.dialect
        self.settings = settings or ApplierSettings()
        self._executor = executor

    def _require_connection(self, action: str) -> None:
        if not self.connection.connected:
            raise NotConnectedError(
                f"Cannot {action}: {self.connection.__class__.__name__} is not connected"
            )

    def _get_executor(self):
        return self._executor if self._executor is not None else self.connection.executor()

    def _log_statement(self, table: TableDefinition, ddl: str) -> None:
        level = logging.INFO if self.settings.log_statements else logging.DEBUG
        logger.log(level, f"CREATE TABLE statement for {table.name}:\n{ddl}")

    def _created(self, table: TableDefinition, index: int, ddl: str, summary) -> TableResult:
        guarded = self.compiler.use_if_not_exists
        if guarded:
            logger.info(f"CREATE TABLE IF NOT EXISTS {table.name} success (created or already present)")
        else:
            logger.info(f"CREATE TABLE {table.name} success")
        return TableResult(
            table=table.name,
            index=index,
            outcome=CreateOutcome.CREATED,
            ddl=ddl,
            elapsed_ms=getattr(summary, "elapsed_ms", 0.0),
            message="created or already present" if guarded else "created",
            guarded=guarded,
        )

    def _classify_failure(
        self,
        table: TableDefinition,
        index: int,
        ddl: str,
        error: EngineError,
    ) -> TableResult:
        """Absorb the dialect's 'already exists' error, raise CreateError otherwise."""
        if self.compiler.sql_dialect.is_already_exists_error(error):
            logger.warning(f"CREATE TABLE {table.name} executed but the table already existed")
            return TableResult(
                table=table.name,
                index=index,
                outcome=CreateOutcome.ALREADY_EXISTS,
                ddl=ddl,
                message=str(error),
            )

        logger.error(f"CREATE TABLE {table.name} failed: {error}")
        raise CreateError(table=table.name, ddl=ddl, cause=error, index=index) from error

    def _new_result(self, dry_run: bool = False) -> ApplyResult:
        return ApplyResult(
            dialect=self.dialect.value,
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
            dry_run=dry_run,
        )

    def _plan(self, schema: SchemaDefinition) -> ApplyResult:
        """Compile every table without executing anything."""
        result = self._new_result(dry_run=True)
        for index, (table, ddl) in enumerate(zip(schema.tables, self.compiler.compile_schema(schema))):
            logger.info(f"[DRY RUN] [{index}] {table.name}")
            self._log_statement(table, ddl)
            result.tables.append(TableResult(
                table=table.name,
                index=index,
                outcome=CreateOutcome.PLANNED,
                ddl=ddl,
                message="not executed",
            ))
        result.success = True
        return result

    def _log_banner(self, schema: SchemaDefinition, dry_run: bool) -> None:
        logger.info("=" * 70)
        logger.info("SCHEMA APPLY")
        logger.info(f"   Dialect: {self.dialect.value}")
        logger.info(f"   Tables: {len(schema.tables)}")
        logger.info(f"   Mode: {'DRY RUN' if dry_run else 'EXECUTE'}")
        logger.info("=" * 70)

    def _finish(self, result: ApplyResult) -> ApplyResult:
        summary = result.to_dict()["summary"]
        result.success = True
        log_checkpoint("tables_created", data=summary)
        logger.info(
            f"Done creating tables: {summary['created']} created "
            f"({summary['guarded']} via IF NOT EXISTS, possibly pre-existing), "
            f"{summary['already_existed']} already existed"
        )
        return result

    def _failed(self, error: CreateError, result: ApplyResult) -> CreateError:
        error.completed = list(result.tables)
        log_checkpoint("create_failed", data={
            "table": error.table,
            "index": error.index,
            "completed": [t.table for t in result.tables],
        })
        logger.error(f"Error creating tables from schema: {error}")
        return error

    @staticmethod
    def _verification(schema: SchemaDefinition, existing: List[str]) -> Dict[str, List[str]]:
        expected = schema.table_names()
        return {
            "expected": expected,
            "existing": existing,
            "missing": [t for t in expected if t not in existing],
        }


# ============================================================================
# SYNC APPLIER
# ============================================================================

class SchemaApplier(_SchemaApplierBase):
    """Apply schemas through a synchronous StatementExecutor."""

    def create_table(self, table: TableDefinition, index: int = 0) -> TableResult:
        """
        Create one table.

        Args:
            table: Table to create
            index: Position of the table within its schema (for reporting)

        Returns:
            TableResult with outcome CREATED or ALREADY_EXISTS

        Raises:
            NotConnectedError: If the connection is not established
            SchemaError: If the table is malformed (nothing executed)
            CreateError: If the engine rejects the statement for any other reason
        """
        self._require_connection(f"create table {table.name}")
        ddl = self.compiler.compile_create_table(table)
        self._log_statement(table, ddl)

        try:
            summary = self._get_executor().run(ddl)
        except EngineError as e:
            return self._classify_failure(table, index, ddl, e)
        return self._created(table, index, ddl, summary)

    def create_tables(self, schema: SchemaDefinition, dry_run: bool = False) -> ApplyResult:
        """
        Create every table of a schema, strictly in order, stopping at the
        first fatal error.

        Args:
            schema: Schema whose table order is the creation order
            dry_run: Compile only; no connection or execution needed

        Returns:
            ApplyResult with one TableResult per table

        Raises:
            NotConnectedError: If not connected (and not a dry run)
            SchemaError: If any table is malformed (nothing executed)
            CreateError: First fatal failure, with index and completed tables
        """
        self._log_banner(schema, dry_run)
        if dry_run:
            return self._plan(schema)

        self._require_connection("create tables")
        self.compiler.validate_schema(schema)

        result = self._new_result()
        for index, table in enumerate(schema.tables):
            with log_context(dialect=self.dialect.value, table=table.name, table_index=index):
                try:
                    result.tables.append(self.create_table(table, index=index))
                except CreateError as e:
                    raise self._failed(e, result)

        if self.settings.verify_after_apply:
            result.verification = self.verify_tables(schema)
            if result.verification["missing"]:
                result.warnings.append(f"Missing tables: {result.verification['missing']}")

        return self._finish(result)

    def verify_tables(self, schema: SchemaDefinition) -> Dict[str, List[str]]:
        """Compare the schema's tables with the tables present in the store."""
        self._require_connection("verify tables")
        verification = self._verification(schema, self.connection.list_tables())
        logger.info(
            f"Verified tables: {len(verification['expected']) - len(verification['missing'])}"
            f"/{len(verification['expected'])} present"
        )
        return verification


# ============================================================================
# ASYNC APPLIER
# ============================================================================

class AsyncSchemaApplier(_SchemaApplierBase):
    """
    Apply schemas through an AsyncStatementExecutor.

    Each creation is awaited to completion before the next one starts.
    """

    async def create_table(self, table: TableDefinition, index: int = 0) -> TableResult:
        """Async counterpart of SchemaApplier.create_table()."""
        self._require_connection(f"create table {table.name}")
        ddl = self.compiler.compile_create_table(table)
        self._log_statement(table, ddl)

        try:
            summary = await self._get_executor().run(ddl)
        except EngineError as e:
            return self._classify_failure(table, index, ddl, e)
        return self._created(table, index, ddl, summary)

    async def create_tables(self, schema: SchemaDefinition, dry_run: bool = False) -> ApplyResult:
        """Async counterpart of SchemaApplier.create_tables()."""
        self._log_banner(schema, dry_run)
        if dry_run:
            return self._plan(schema)

        self._require_connection("create tables")
        self.compiler.validate_schema(schema)

        result = self._new_result()
        for index, table in enumerate(schema.tables):
            with log_context(dialect=self.dialect.value, table=table.name, table_index=index):
                try:
                    result.tables.append(await self.create_table(table, index=index))
                except CreateError as e:
                    raise self._failed(e, result)

        if self.settings.verify_after_apply:
            result.verification = await self.verify_tables(schema)
            if result.verification["missing"]:
                result.warnings.append(f"Missing tables: {result.verification['missing']}")

        return self._finish(result)

    async def verify_tables(self, schema: SchemaDefinition) -> Dict[str, List[str]]:
        """Async counterpart of SchemaApplier.verify_tables()."""
        self._require_connection("verify tables")
        return self._verification(schema, await self.connection.list_tables())


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaApplier",
    "AsyncSchemaApplier",
    "ApplyResult",
    "TableResult",
]
