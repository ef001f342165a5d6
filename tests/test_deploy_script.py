# ============================================================================
# DEPLOY SCRIPT TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Tests - scripts/deploy_schema.py command line
# PURPOSE: Verify dry run, drop preview, apply and status modes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Deploy Script Tests

Run with:
    pytest tests/test_deploy_script.py -v
"""

import logging
import pytest
from pathlib import Path

from scripts.deploy_schema import main

BOOKSTORE = str(Path(__file__).resolve().parent.parent / "schemas" / "bookstore.json")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DDL_DIALECT", "SQLITE_FILE_PATH", "DATABASE_URL", "DDL_USE_IF_NOT_EXISTS"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    # main() installs a stdout handler bound to the captured stream
    root.handlers[:] = handlers
    root.setLevel(level)


class TestDeploySchemaScript:
    """Exercise each mode of the deploy script."""

    def test_dry_run(self, capsys):
        assert main([BOOKSTORE, "--dry-run"]) == 0

        out = capsys.readouterr().out
        assert "[DRY RUN]" in out
        assert 'CREATE TABLE IF NOT EXISTS "Book"' in out
        assert out.count("-- Statement") == 5

    def test_drop_mssql(self, capsys):
        assert main([BOOKSTORE, "--dialect", "mssql", "--drop"]) == 0

        out = capsys.readouterr().out
        assert "IF OBJECT_ID('dbo.[Review]', 'U') IS NOT NULL DROP TABLE [dbo].[Review];" in out
        assert out.index("[Review]") < out.index("[Book]")

    def test_apply_and_status(self, tmp_path, capsys):
        db = str(tmp_path / "book.db")

        assert main([BOOKSTORE, "--sqlite-path", db]) == 0
        assert main([BOOKSTORE, "--sqlite-path", db, "--no-if-not-exists"]) == 0
        assert main([BOOKSTORE, "--sqlite-path", db, "--status"]) == 0

        out = capsys.readouterr().out
        assert "already_exists" in out
        assert "✅ BookPrice" in out

    def test_status_reports_missing(self, tmp_path, capsys):
        db = str(tmp_path / "empty.db")
        assert main([BOOKSTORE, "--sqlite-path", db, "--status"]) == 1
        assert "❌ Book" in capsys.readouterr().out

    def test_missing_sqlite_path(self, capsys):
        assert main([BOOKSTORE]) == 1
        assert "path" in capsys.readouterr().out

    def test_missing_schema_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json"), "--dry-run"]) == 1

    def test_mssql_cannot_apply(self, capsys):
        assert main([BOOKSTORE, "--dialect", "mssql"]) == 1
        assert "No connection provider" in capsys.readouterr().out

    def test_guarded_results_marked(self, tmp_path, capsys):
        db = str(tmp_path / "book.db")

        assert main([BOOKSTORE, "--sqlite-path", db]) == 0

        assert "✅ Book: created (IF NOT EXISTS)" in capsys.readouterr().out

    def test_failure_logged(self, capsys):
        assert main([BOOKSTORE, "--dialect", "mssql"]) == 1
        assert "Schema deployment failed" in capsys.readouterr().out
