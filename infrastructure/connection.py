# ============================================================================
# CONNECTION LIFECYCLE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Infrastructure - Connection providers
# PURPOSE: One live connection per provider, explicit state machine
# CREATED: 19 OCT 2026
# ============================================================================
"""
Connection Lifecycle

Each provider owns at most one live connection and exposes the state
machine the schema applier depends on:

    DISCONNECTED -> CONNECTING -> CONNECTED
                               -> DISCONNECTED (connect failed, caller may retry)

There is no automatic reconnection and nothing moves a provider out of
CONNECTED; the connection lives until process teardown.

A second connect() is not an error for the caller: the existing handle is
returned (and AlreadyConnectedError raised only when asked for). Settings
are logged with credentials redacted.

Providers:
    SQLiteConnectionProvider         stdlib sqlite3, WAL journal mode
    PostgreSQLConnectionProvider     psycopg 3, dict_row
    AsyncPostgreSQLConnectionProvider psycopg 3 AsyncConnection

Usage:
    provider = SQLiteConnectionProvider(DatabaseSettings(sqlite_file_path="book.db"))
    provider.connect()
    executor = provider.executor()
"""

import logging
import sqlite3
from typing import Any, List, Optional, Tuple, Type

import psycopg
from psycopg.rows import dict_row

from core.config.settings import DatabaseSettings
from core.contracts import ConnectionState, Dialect
from core.errors import (
    AlreadyConnectedError,
    ConnectFailedError,
    NotConnectedError,
    StoreConnectionError,
)
from core.schema.dialects import SQLDialect, get_dialect
from infrastructure.executors import (
    AsyncPostgreSQLStatementExecutor,
    PostgreSQLStatementExecutor,
    SQLiteStatementExecutor,
)

logger = logging.getLogger(__name__)

SQLITE_JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")


# ============================================================================
# STATE MACHINE
# ============================================================================

class _ConnectionStateMachine:
    """Shared lifecycle bookkeeping for sync and async providers."""

    dialect: Dialect
    DRIVER_ERRORS: Tuple[Type[BaseException], ...] = ()

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self.settings = settings or DatabaseSettings(dialect=self.dialect)
        self._state = ConnectionState.DISCONNECTED
        self._handle: Any = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def sql_dialect(self) -> SQLDialect:
        return get_dialect(self.dialect)

    @property
    def db(self) -> Any:
        """The live driver connection."""
        self._require_connected("access the database handle")
        return self._handle

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def _require_connected(self, action: str) -> None:
        if not self.connected:
            raise NotConnectedError(
                f"{self.name} cannot {action}: not connected (state={self._state.value})"
            )

    def _check_reconnect(self, raise_if_connected: bool) -> bool:
        """
        Handle connect() on a provider that is not DISCONNECTED.

        Returns:
            True when the existing handle should be returned
        """
        if self._state == ConnectionState.CONNECTED:
            logger.error(
                f"{self.name} is already connected - skipping the second connect call. "
                f"Settings: {self.settings.redacted()}"
            )
            if raise_if_connected:
                raise AlreadyConnectedError(
                    f"{self.name} is already connected",
                    handle=self._handle,
                )
            return True
        if self._state == ConnectionState.CONNECTING:
            raise StoreConnectionError(f"{self.name} connect already in progress")
        return False

    def _connect_failed(self, error: BaseException) -> ConnectFailedError:
        self._state = ConnectionState.DISCONNECTED
        logger.error(
            f"{self.name} failed to connect: {error}. "
            f"Settings: {self.settings.redacted()}"
        )
        if isinstance(error, ConnectFailedError):
            return error
        return ConnectFailedError(f"{self.name} failed to connect: {error}", cause=error)

    def _connect_succeeded(self, handle: Any) -> Any:
        self._handle = handle
        self._state = ConnectionState.CONNECTED
        logger.info(f"{self.name} connected ({self.dialect.value})")
        return handle


class ConnectionProvider(_ConnectionStateMachine):
    """Base class for synchronous providers."""

    def connect(self, raise_if_connected: bool = False) -> Any:
        """
        Open the connection.

        Args:
            raise_if_connected: Raise AlreadyConnectedError instead of
                returning the existing handle on a second call

        Returns:
            Driver connection handle

        Raises:
            ConnectFailedError: If the driver cannot connect
        """
        if self._check_reconnect(raise_if_connected):
            return self._handle

        self._state = ConnectionState.CONNECTING
        try:
            handle = self._open()
        except ConnectFailedError as e:
            raise self._connect_failed(e)
        except self.DRIVER_ERRORS as e:
            raise self._connect_failed(e) from e
        return self._connect_succeeded(handle)

    def _open(self) -> Any:
        raise NotImplementedError

    def executor(self):
        raise NotImplementedError

    def list_tables(self) -> List[str]:
        raise NotImplementedError


class AsyncConnectionProvider(_ConnectionStateMachine):
    """Base class for asynchronous providers."""

    async def connect(self, raise_if_connected: bool = False) -> Any:
        """Async counterpart of ConnectionProvider.connect()."""
        if self._check_reconnect(raise_if_connected):
            return self._handle

        self._state = ConnectionState.CONNECTING
        try:
            handle = await self._open()
        except ConnectFailedError as e:
            raise self._connect_failed(e)
        except self.DRIVER_ERRORS as e:
            raise self._connect_failed(e) from e
        return self._connect_succeeded(handle)

    async def _open(self) -> Any:
        raise NotImplementedError

    def executor(self):
        raise NotImplementedError

    async def list_tables(self) -> List[str]:
        raise NotImplementedError


# ============================================================================
# SQLITE
# ============================================================================

class SQLiteConnectionProvider(ConnectionProvider):
    """
    SQLite file connection.

    Requires settings.sqlite_file_path (":memory:" is allowed). File
    databases are switched to the configured journal mode (WAL by default).
    """

    dialect = Dialect.SQLITE
    DRIVER_ERRORS = (sqlite3.Error,)

    def _open(self) -> sqlite3.Connection:
        path = self.settings.sqlite_file_path
        if not path:
            raise ConnectFailedError(
                f"{self.name} cannot connect: the database file path is invalid; "
                f"set sqlite_file_path (SQLITE_FILE_PATH)"
            )

        journal_mode = (self.settings.journal_mode or "").upper()
        if journal_mode and journal_mode not in SQLITE_JOURNAL_MODES:
            raise ConnectFailedError(
                f"{self.name} cannot connect: unsupported journal mode {journal_mode!r}"
            )

        logger.info(f"{self.name} connecting to file [{path}]")
        conn = sqlite3.connect(path)
        if journal_mode and path != ":memory:":
            try:
                conn.execute(f"PRAGMA journal_mode = {journal_mode}")
            except sqlite3.Error:
                conn.close()
                raise
        return conn

    def executor(self) -> SQLiteStatementExecutor:
        self._require_connected("create a statement executor")
        return SQLiteStatementExecutor(self._handle)

    def list_tables(self) -> List[str]:
        self._require_connected("list tables")
        rows = self._handle.execute(self.sql_dialect.list_tables_query()).fetchall()
        return [row[0] for row in rows]


# ============================================================================
# POSTGRESQL
# ============================================================================

def _first_value(row: Any) -> Any:
    if isinstance(row, dict):
        return next(iter(row.values()))
    return row[0]


class PostgreSQLConnectionProvider(ConnectionProvider):
    """PostgreSQL connection via psycopg 3."""

    dialect = Dialect.POSTGRESQL
    DRIVER_ERRORS = (psycopg.Error,)

    def _open(self) -> psycopg.Connection:
        logger.info(f"{self.name} connecting to {self.settings.postgres_target()}")
        return psycopg.connect(self.settings.postgres_conninfo(), row_factory=dict_row)

    def executor(self) -> PostgreSQLStatementExecutor:
        self._require_connected("create a statement executor")
        return PostgreSQLStatementExecutor(self._handle)

    def list_tables(self) -> List[str]:
        self._require_connected("list tables")
        with self._handle.cursor() as cur:
            cur.execute(self.sql_dialect.list_tables_query())
            return [_first_value(row) for row in cur.fetchall()]


class AsyncPostgreSQLConnectionProvider(AsyncConnectionProvider):
    """PostgreSQL connection via psycopg 3 AsyncConnection."""

    dialect = Dialect.POSTGRESQL
    DRIVER_ERRORS = (psycopg.Error,)

    async def _open(self) -> psycopg.AsyncConnection:
        logger.info(f"{self.name} connecting to {self.settings.postgres_target()}")
        return await psycopg.AsyncConnection.connect(
            self.settings.postgres_conninfo(), row_factory=dict_row
        )

    def executor(self) -> AsyncPostgreSQLStatementExecutor:
        self._require_connected("create a statement executor")
        return AsyncPostgreSQLStatementExecutor(self._handle)

    async def list_tables(self) -> List[str]:
        self._require_connected("list tables")
        async with self._handle.cursor() as cur:
            await cur.execute(self.sql_dialect.list_tables_query())
            return [_first_value(row) for row in await cur.fetchall()]


# ============================================================================
# FACTORY
# ============================================================================

def create_connection_provider(settings: DatabaseSettings) -> ConnectionProvider:
    """
    Build the synchronous provider for settings.dialect.

    Raises:
        ValueError: For dialects without a bundled driver (mssql)
    """
    if settings.dialect == Dialect.SQLITE:
        return SQLiteConnectionProvider(settings)
    if settings.dialect == Dialect.POSTGRESQL:
        return PostgreSQLConnectionProvider(settings)
    raise ValueError(
        f"No connection provider for dialect {settings.dialect.value}; "
        f"compile DDL with DDLCompiler and execute it with your own StatementExecutor"
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ConnectionProvider",
    "AsyncConnectionProvider",
    "SQLiteConnectionProvider",
    "PostgreSQLConnectionProvider",
    "AsyncPostgreSQLConnectionProvider",
    "create_connection_provider",
]
