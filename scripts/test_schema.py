#!/usr/bin/env python
# ============================================================================
# SCHEMA TEST SCRIPT
# ============================================================================
# Compiles a schema document for every dialect and prints the DDL
# Run: python scripts/test_schema.py [schemas/bookstore.json]
# ============================================================================

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.contracts import Dialect
from core.models import SchemaDefinition
from core.schema import DDLCompiler

DEFAULT_SCHEMA = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "schemas",
    "bookstore.json",
)


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_SCHEMA

    print("=" * 70)
    print("SCHEMA DDL - Schema Generation Test")
    print("=" * 70)

    print(f"\n1. Loading {path}...")
    schema = SchemaDefinition.from_file(path)
    print(f"   {len(schema.tables)} tables: {', '.join(schema.table_names())}")

    for dialect in Dialect:
        compiler = DDLCompiler(dialect)
        statements = compiler.compile_schema(schema)

        print(f"\n2. [{dialect.value}] Generated {len(statements)} DDL statements:\n")
        for i, stmt in enumerate(statements, 1):
            print(f"-- Statement {i}")
            print(stmt)
            print()

    print("=" * 70)
    print("DDL generation complete. Review statements above.")
    print("=" * 70)


if __name__ == "__main__":
    main()
