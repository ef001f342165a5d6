# ============================================================================
# SCHEMA DOCUMENT MODEL TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Tests - Schema document parsing
# PURPOSE: Verify JSON documents load into ColumnDefinition/TableDefinition
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Document Model Tests

Covers:
1. ColumnType wire values and accepted aliases
2. Document loading (aliases, field names, int sizes)
3. Unknown DataType fails closed with UNKNOWN_TYPE
4. Malformed documents fail with INVALID_DOCUMENT
5. Table helpers (primary_key, key_columns)

Run with:
    pytest tests/test_schema_models.py -v
"""

import json
import pytest
from pydantic import ValidationError

from core.contracts import ColumnType, SchemaErrorReason
from core.errors import SchemaError
from core.models import ColumnDefinition, TableDefinition, SchemaDefinition


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def book_document():
    """The Book table as it appears in a schema document."""
    return {
        "Tables": [
            {
                "TableName": "Book",
                "Columns": [
                    {"Column": "IDBook", "DataType": "ID"},
                    {"Column": "GUIDBook", "DataType": "GUID"},
                    {"Column": "Title", "DataType": "String", "Size": "256"},
                    {"Column": "Price", "DataType": "Decimal", "Size": "8,2"},
                    {"Column": "IDAuthor", "DataType": "ForeignKey"},
                ],
            }
        ]
    }


# ============================================================================
# COLUMN TYPES
# ============================================================================

class TestColumnType:
    """Test DataType string resolution."""

    @pytest.mark.parametrize("value,expected", [
        ("ID", ColumnType.IDENTITY),
        ("GUID", ColumnType.GUID),
        ("ForeignKey", ColumnType.FOREIGN_KEY),
        ("Numeric", ColumnType.NUMERIC),
        ("Decimal", ColumnType.DECIMAL),
        ("String", ColumnType.STRING),
        ("Text", ColumnType.TEXT),
        ("DateTime", ColumnType.DATETIME),
        ("Boolean", ColumnType.BOOLEAN),
    ])
    def test_wire_values(self, value, expected):
        assert ColumnType.parse(value) is expected

    def test_aliases(self):
        assert ColumnType.parse("Identity") is ColumnType.IDENTITY
        assert ColumnType.parse("Guid") is ColumnType.GUID

    def test_aliases_are_case_sensitive(self):
        assert ColumnType.parse("identity") is None
        assert ColumnType.parse("string") is None

    def test_unknown_returns_none(self):
        assert ColumnType.parse("Blob") is None

    def test_requires_size(self):
        sized = {t for t in ColumnType if t.requires_size()}
        assert sized == {ColumnType.DECIMAL, ColumnType.STRING}

    def test_key_markers(self):
        keys = {t for t in ColumnType if t.is_key_marker()}
        assert keys == {ColumnType.IDENTITY, ColumnType.FOREIGN_KEY}


# ============================================================================
# COLUMN / TABLE MODELS
# ============================================================================

class TestColumnDefinition:
    """Test single column parsing."""

    def test_from_aliases(self):
        column = ColumnDefinition.model_validate(
            {"Column": "Title", "DataType": "String", "Size": "256"}
        )
        assert column.name == "Title"
        assert column.data_type == ColumnType.STRING
        assert column.size == "256"

    def test_from_field_names(self):
        column = ColumnDefinition(name="Title", data_type=ColumnType.STRING, size="64")
        assert column.size == "64"

    def test_integer_size_coerced_to_string(self):
        column = ColumnDefinition.model_validate(
            {"Column": "Title", "DataType": "String", "Size": 128}
        )
        assert column.size == "128"

    def test_alias_data_type(self):
        column = ColumnDefinition.model_validate({"Column": "IDBook", "DataType": "Identity"})
        assert column.data_type == ColumnType.IDENTITY

    def test_unknown_data_type_rejected(self):
        with pytest.raises(ValidationError):
            ColumnDefinition.model_validate({"Column": "Cover", "DataType": "Blob"})

    def test_frozen(self):
        column = ColumnDefinition(name="Title", data_type=ColumnType.TEXT)
        with pytest.raises(ValidationError):
            column.name = "Other"


class TestTableDefinition:
    """Test table helpers."""

    def test_primary_key(self):
        table = TableDefinition(
            name="Book",
            columns=[
                ColumnDefinition(name="IDBook", data_type=ColumnType.IDENTITY),
                ColumnDefinition(name="Title", data_type=ColumnType.TEXT),
            ],
        )
        assert table.primary_key == "IDBook"

    def test_no_primary_key(self):
        table = TableDefinition(
            name="BookAuthorJoin",
            columns=[
                ColumnDefinition(name="IDBook", data_type=ColumnType.FOREIGN_KEY),
                ColumnDefinition(name="IDAuthor", data_type=ColumnType.FOREIGN_KEY),
            ],
        )
        assert table.primary_key is None
        assert table.key_columns() == ["IDBook", "IDAuthor"]

    def test_column_order_preserved(self):
        names = ["Z", "A", "M"]
        table = TableDefinition(
            name="T",
            columns=[ColumnDefinition(name=n, data_type=ColumnType.TEXT) for n in names],
        )
        assert table.column_names() == names


# ============================================================================
# DOCUMENT LOADING
# ============================================================================

class TestSchemaDocument:
    """Test SchemaDefinition.from_document / from_file."""

    def test_from_dict(self, book_document):
        schema = SchemaDefinition.from_document(book_document)
        assert schema.table_names() == ["Book"]
        book = schema.tables[0]
        assert book.column_names() == ["IDBook", "GUIDBook", "Title", "Price", "IDAuthor"]
        assert book.columns[3].size == "8,2"

    def test_from_json_string(self, book_document):
        schema = SchemaDefinition.from_document(json.dumps(book_document))
        assert schema.tables[0].name == "Book"

    def test_from_file(self, tmp_path, book_document):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(book_document), encoding="utf-8")
        schema = SchemaDefinition.from_file(path)
        assert schema.table_names() == ["Book"]

    def test_table_order_preserved(self):
        schema = SchemaDefinition.from_document({
            "Tables": [
                {"TableName": name, "Columns": [{"Column": "X", "DataType": "Text"}]}
                for name in ["Author", "Book", "BookAuthorJoin"]
            ]
        })
        assert schema.table_names() == ["Author", "Book", "BookAuthorJoin"]

    def test_unknown_fields_ignored(self, book_document):
        book_document["Tables"][0]["Domain"] = "Default"
        schema = SchemaDefinition.from_document(book_document)
        assert schema.tables[0].name == "Book"

    def test_empty_tables_list_is_valid(self):
        schema = SchemaDefinition.from_document({"Tables": []})
        assert schema.tables == ()

    def test_unknown_data_type_fails_closed(self, book_document):
        book_document["Tables"][0]["Columns"][1]["DataType"] = "Blob"

        with pytest.raises(SchemaError) as exc_info:
            SchemaDefinition.from_document(book_document)

        assert exc_info.value.reason == SchemaErrorReason.UNKNOWN_TYPE
        assert exc_info.value.table == "Book"
        assert exc_info.value.column == "GUIDBook"

    def test_invalid_json(self):
        with pytest.raises(SchemaError) as exc_info:
            SchemaDefinition.from_document("{not json")
        assert exc_info.value.reason == SchemaErrorReason.INVALID_DOCUMENT

    def test_missing_tables_key(self):
        with pytest.raises(SchemaError) as exc_info:
            SchemaDefinition.from_document({"Schema": []})
        assert exc_info.value.reason == SchemaErrorReason.INVALID_DOCUMENT

    def test_missing_column_name(self, book_document):
        del book_document["Tables"][0]["Columns"][0]["Column"]
        with pytest.raises(SchemaError) as exc_info:
            SchemaDefinition.from_document(book_document)
        assert exc_info.value.reason == SchemaErrorReason.INVALID_DOCUMENT
        assert exc_info.value.table == "Book"

    def test_bookstore_example_loads(self):
        from pathlib import Path

        path = Path(__file__).resolve().parent.parent / "schemas" / "bookstore.json"
        schema = SchemaDefinition.from_file(path)
        assert schema.table_names()[0] == "Book"
        assert len(schema.tables) == 5
