#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# PURPOSE: Compile a schema document and create its tables
# USAGE:
#   python scripts/deploy_schema.py schemas/bookstore.json --dry-run
#   python scripts/deploy_schema.py schemas/bookstore.json --sqlite-path book.db
#   python scripts/deploy_schema.py schemas/bookstore.json --status
# ============================================================================

import sys
import os
import argparse
import dataclasses

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import DatabaseSettings
from core.contracts import Dialect
from core.errors import CreateError, DDLError
from core.logging import ComponentType, configure_logging, get_logger
from core.models import SchemaDefinition
from core.schema import DDLCompiler
from infrastructure import SchemaApplier, create_connection_provider

logger = get_logger(__name__, ComponentType.SCRIPT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create the tables of a schema document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py schemas/bookstore.json --dry-run
  python scripts/deploy_schema.py schemas/bookstore.json --dialect mssql --drop
  python scripts/deploy_schema.py schemas/bookstore.json --sqlite-path book.db
  python scripts/deploy_schema.py schemas/bookstore.json --dialect postgresql --status

Environment Variables:
  DDL_DIALECT           sqlite | postgresql | mssql (default: sqlite)
  SQLITE_FILE_PATH      SQLite database file
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
        """
    )
    parser.add_argument("schema", help="Path to the JSON schema document")
    parser.add_argument(
        "--dialect",
        choices=[d.value for d in Dialect],
        help="Target dialect (overrides DDL_DIALECT)"
    )
    parser.add_argument(
        "--sqlite-path",
        type=str,
        help="SQLite database file (overrides SQLITE_FILE_PATH)"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Print DROP TABLE statements (never executed)"
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Report which schema tables exist"
    )
    parser.add_argument(
        "--no-if-not-exists",
        action="store_true",
        help="Omit IF NOT EXISTS and rely on already-exists classification"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit structured JSON logs"
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> DatabaseSettings:
    settings = DatabaseSettings.from_env()
    overrides = {}
    if args.dialect:
        overrides["dialect"] = Dialect(args.dialect)
    if args.sqlite_path:
        overrides["sqlite_file_path"] = args.sqlite_path
    if args.connection:
        overrides["database_url"] = args.connection
    if args.no_if_not_exists:
        overrides["use_if_not_exists"] = False
    return dataclasses.replace(settings, **overrides)


def print_statements(statements) -> None:
    for i, stmt in enumerate(statements, 1):
        print(f"-- Statement {i}")
        print(stmt)
        print()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else "INFO",
        json_output=args.json_logs,
    )

    settings = resolve_settings(args)

    print("=" * 70)
    print(f"SCHEMA DDL v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE}) - Schema Deployment")
    print("=" * 70)
    print(f"Schema: {args.schema}")
    print(f"Dialect: {settings.dialect.value}")
    print("=" * 70)

    try:
        schema = SchemaDefinition.from_file(args.schema)
        compiler = DDLCompiler(settings.dialect, use_if_not_exists=settings.use_if_not_exists)

        if args.drop:
            print("\n[DROP STATEMENTS]\n")
            print_statements(compiler.compile_drop_schema(schema))
            return 0

        if args.dry_run:
            print("\n[DRY RUN]\n")
            print_statements(compiler.compile_schema(schema))
            return 0

        provider = create_connection_provider(settings)
        provider.connect()
        applier = SchemaApplier(provider, compiler=compiler)

        if args.status:
            print("\n[STATUS CHECK]\n")
            status = applier.verify_tables(schema)
            for table in status["expected"]:
                marker = "✅" if table not in status["missing"] else "❌"
                print(f"{marker} {table}")
            return 1 if status["missing"] else 0

        result = applier.create_tables(schema)

    except CreateError as e:
        logger.error(f"Schema deployment stopped at {e.table}: {e.cause}")
        print(f"\n❌ Creation stopped at table {e.table} (index {e.index})")
        for table_result in e.completed:
            print(f"   ✅ {table_result.table}: {table_result.outcome.value}")
        print(f"   Cause: {e.cause}")
        if args.verbose:
            print(f"\n{e.ddl}")
        return 1
    except (DDLError, ValueError, OSError) as e:
        logger.error(f"Schema deployment failed: {e}")
        print(f"\n❌ {e}")
        return 1

    print("\n[RESULTS]\n")
    for table_result in result.tables:
        status_emoji = {
            "created": "✅",
            "already_exists": "⏭️",
        }.get(table_result.outcome.value, "❓")
        note = " (IF NOT EXISTS)" if table_result.guarded else ""
        print(f"{status_emoji} {table_result.table}: {table_result.outcome.value}{note}")

    print("\n" + "=" * 70)
    print("✅ Deployment completed successfully!")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
