# ============================================================================
# STATEMENT EXECUTORS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Infrastructure - Single-statement execution
# PURPOSE: Run one DDL statement on a live connection, wrapping driver errors
# CREATED: 19 OCT 2026
# ============================================================================
"""
Statement Executors

The schema applier only needs one capability from the storage engine:
run a single statement and report success or an EngineError.

    run(ddl) -> ExecutionSummary      (raises EngineError)

Each statement is committed on its own; there is no transaction spanning
several statements. Timeouts and cancellation, if wanted, belong to the
connection handed to the executor.

Usage:
    executor = SQLiteStatementExecutor(sqlite3.connect("book.db"))
    summary = executor.run('CREATE TABLE IF NOT EXISTS "Book" ("IDBook" INTEGER);')
"""

import logging
import sqlite3
import time
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import psycopg

from core.errors import EngineError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionSummary:
    """Result of one successfully executed statement."""
    statement: str
    rowcount: int = -1
    elapsed_ms: float = 0.0


@runtime_checkable
class StatementExecutor(Protocol):
    """Runs one statement synchronously."""

    def run(self, ddl: str) -> ExecutionSummary:
        ...


@runtime_checkable
class AsyncStatementExecutor(Protocol):
    """Runs one statement; awaited to completion by the caller."""

    async def run(self, ddl: str) -> ExecutionSummary:
        ...


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


# ============================================================================
# SQLITE
# ============================================================================

class SQLiteStatementExecutor:
    """Executes statements on a stdlib sqlite3 connection."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def run(self, ddl: str) -> ExecutionSummary:
        started = time.perf_counter()
        try:
            cursor = self.connection.execute(ddl)
            self.connection.commit()
        except sqlite3.Error as e:
            logger.debug(f"SQLite statement failed: {e}")
            raise EngineError.from_exception(e) from e
        return ExecutionSummary(
            statement=ddl,
            rowcount=cursor.rowcount,
            elapsed_ms=_elapsed_ms(started),
        )


# ============================================================================
# POSTGRESQL
# ============================================================================

class PostgreSQLStatementExecutor:
    """Executes statements on a psycopg connection, committing each one."""

    def __init__(self, connection: psycopg.Connection):
        self.connection = connection

    def run(self, ddl: str) -> ExecutionSummary:
        started = time.perf_counter()
        try:
            with self.connection.cursor() as cur:
                cur.execute(ddl)
                rowcount = cur.rowcount
            self.connection.commit()
        except psycopg.Error as e:
            logger.debug(f"PostgreSQL statement failed [{e.sqlstate}]: {e}")
            # Leave the connection usable for the next statement
            try:
                self.connection.rollback()
            except psycopg.Error as rollback_error:
                logger.warning(f"Rollback after failed statement also failed: {rollback_error}")
            raise EngineError.from_exception(e) from e
        return ExecutionSummary(statement=ddl, rowcount=rowcount, elapsed_ms=_elapsed_ms(started))


class AsyncPostgreSQLStatementExecutor:
    """Executes statements on a psycopg AsyncConnection, committing each one."""

    def __init__(self, connection: psycopg.AsyncConnection):
        self.connection = connection

    async def run(self, ddl: str) -> ExecutionSummary:
        started = time.perf_counter()
        try:
            async with self.connection.cursor() as cur:
                await cur.execute(ddl)
                rowcount = cur.rowcount
            await self.connection.commit()
        except psycopg.Error as e:
            logger.debug(f"PostgreSQL statement failed [{e.sqlstate}]: {e}")
            try:
                await self.connection.rollback()
            except psycopg.Error as rollback_error:
                logger.warning(f"Rollback after failed statement also failed: {rollback_error}")
            raise EngineError.from_exception(e) from e
        return ExecutionSummary(statement=ddl, rowcount=rowcount, elapsed_ms=_elapsed_ms(started))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ExecutionSummary",
    "StatementExecutor",
    "AsyncStatementExecutor",
    "SQLiteStatementExecutor",
    "PostgreSQLStatementExecutor",
    "AsyncPostgreSQLStatementExecutor",
]
