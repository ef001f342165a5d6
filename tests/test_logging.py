# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Tests - core.logging
# PURPOSE: Verify context stacking, formatters and checkpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)


def _record(msg="Creating table", extra=None):
    record = logging.LogRecord(
        name="infrastructure.schema_applier",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    if extra is not None:
        record.extra = extra
    return record


class TestLogContext:
    """Test context stacking across threads and tasks."""

    def test_empty_by_default(self):
        assert get_current_context().to_dict() == {}

    def test_nested_context_inherits(self):
        with log_context(dialect="sqlite"):
            with log_context(table="Book", table_index=0) as ctx:
                assert ctx.dialect == "sqlite"
                assert ctx.to_dict() == {"dialect": "sqlite", "table": "Book", "table_index": 0}
            assert get_current_context().table is None
        assert get_current_context().dialect is None

    def test_tasks_keep_their_own_context(self):
        async def create(table):
            with log_context(table=table):
                await asyncio.sleep(0)
                return get_current_context().table

        async def main():
            return await asyncio.gather(create("Book"), create("Author"))

        assert asyncio.run(main()) == ["Book", "Author"]
        assert get_current_context().table is None


class TestFormatters:
    """Test JSON and human output."""

    def test_structured_includes_context(self):
        with log_context(dialect="postgresql", table="Author"):
            data = json.loads(StructuredFormatter().format(_record()))

        assert data["message"] == "Creating table"
        assert data["level"] == "INFO"
        assert data["context"] == {"dialect": "postgresql", "table": "Author"}
        assert data["timestamp"].endswith("Z")

    def test_structured_includes_extra(self):
        data = json.loads(StructuredFormatter().format(_record(extra={"columns": 5})))
        assert data["data"] == {"columns": 5}

    def test_human_inline_context(self):
        with log_context(dialect="sqlite", table="Book", table_index=2):
            line = HumanFormatter().format(_record())

        assert "[dialect=sqlite, table=Book, index=2]" in line
        assert line.endswith("Creating table")

    def test_human_omits_context_fields_from_extra(self):
        extra = {"component": "applier", "table": "Book", "columns": 5}
        with log_context(table="Book"):
            line = HumanFormatter().format(_record(extra=extra))

        assert "[table=Book]" in line
        assert line.endswith("Creating table {'columns': 5}")


class TestContextLogger:
    """Test the adapter and checkpoints."""

    def test_component_attached(self, caplog):
        logger = get_logger("tests.logging", ComponentType.APPLIER)

        with caplog.at_level(logging.INFO, logger="tests.logging"):
            with log_context(table="Book"):
                logger.info("hello")

        record = caplog.records[-1]
        assert record.extra["component"] == "applier"
        assert record.extra["table"] == "Book"

    def test_checkpoint(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkpoint"):
            with log_context(dialect="sqlite"):
                log_checkpoint("tables_created", data={"created": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "CHECKPOINT: tables_created"
        assert record.extra["checkpoint"] == "tables_created"
        assert record.extra["dialect"] == "sqlite"
        assert record.extra["data"] == {"created": 3}
