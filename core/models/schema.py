# ============================================================================
# CLAUDE CONTEXT - SCHEMA DOCUMENT MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Domain model - Dialect-neutral table schema
# PURPOSE: Parse and hold schema documents (tables of typed columns)
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Schema Document Models

Immutable, dialect-neutral description of a set of tables. Field aliases
match the JSON schema document format:

    {
        "Tables": [
            {
                "TableName": "Book",
                "Columns": [
                    {"Column": "IDBook", "DataType": "ID"},
                    {"Column": "Title", "DataType": "String", "Size": "256"}
                ]
            }
        ]
    }

Table order is creation order. Parents must come before children; no
dependency inference is done.

Structural rules (empty tables, sizes, duplicate names, primary keys) are
checked by the DDL compiler, not here, so hand-built tables are validated
the same way as loaded documents.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.contracts import ColumnType, SchemaErrorReason
from core.errors import SchemaError


_MODEL_CONFIG = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class ColumnDefinition(BaseModel):
    """One typed column of a table."""

    name: str = Field(..., alias="Column")
    data_type: ColumnType = Field(..., alias="DataType")
    size: Optional[str] = Field(default=None, alias="Size")

    model_config = _MODEL_CONFIG

    @field_validator("data_type", mode="before")
    @classmethod
    def _parse_data_type(cls, value: Any) -> ColumnType:
        if isinstance(value, ColumnType):
            return value
        parsed = ColumnType.parse(value) if isinstance(value, str) else None
        if parsed is None:
            raise ValueError(f"unknown DataType {value!r}")
        return parsed

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> Optional[str]:
        # Documents carry sizes as strings or bare integers
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        raise ValueError(f"Size must be a string or integer, got {value!r}")


class TableDefinition(BaseModel):
    """A named, ordered list of columns."""

    name: str = Field(..., alias="TableName")
    columns: Tuple[ColumnDefinition, ...] = Field(default=(), alias="Columns")
    description: Optional[str] = Field(default=None, alias="Description")

    model_config = _MODEL_CONFIG

    @property
    def primary_key(self) -> Optional[str]:
        """Name of the identity column, if the table has exactly one."""
        identities = [c.name for c in self.columns if c.data_type == ColumnType.IDENTITY]
        return identities[0] if len(identities) == 1 else None

    def key_columns(self) -> List[str]:
        """Names of identity and foreign key columns, in column order."""
        return [c.name for c in self.columns if c.data_type.is_key_marker()]

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]


class SchemaDefinition(BaseModel):
    """Ordered set of tables; order is creation order."""

    tables: Tuple[TableDefinition, ...] = Field(..., alias="Tables")

    model_config = _MODEL_CONFIG

    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    # ----------------------------------------------------------------
    # Loading
    # ----------------------------------------------------------------

    @classmethod
    def from_document(cls, document: Union[str, bytes, Dict[str, Any]]) -> "SchemaDefinition":
        """
        Build a schema from a JSON string or an already-parsed document.

        Raises:
            SchemaError: UNKNOWN_TYPE for an unrecognised DataType,
                INVALID_DOCUMENT for anything else that fails to parse
        """
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except ValueError as e:
                raise SchemaError(
                    f"Schema document is not valid JSON: {e}",
                    reason=SchemaErrorReason.INVALID_DOCUMENT,
                ) from e

        try:
            return cls.model_validate(document)
        except ValidationError as e:
            raise _schema_error_from_validation(e, document) from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaDefinition":
        """Load a schema document from a JSON file."""
        return cls.from_document(Path(path).read_text(encoding="utf-8"))


def _schema_error_from_validation(error: ValidationError, document: Any) -> SchemaError:
    """Translate the first pydantic error into a SchemaError with location."""
    first = error.errors()[0]
    loc = first.get("loc", ())

    table = None
    column = None
    try:
        if len(loc) >= 2 and loc[0] in ("Tables", "tables"):
            table_doc = document["Tables"][loc[1]]
            table = table_doc.get("TableName")
            if len(loc) >= 4 and loc[2] in ("Columns", "columns"):
                column = table_doc["Columns"][loc[3]].get("Column")
    except (KeyError, IndexError, TypeError, AttributeError):
        pass

    where = ""
    if table:
        where = f" in table {table}"
    if column:
        where += f", column {column}"

    if loc and loc[-1] in ("DataType", "data_type"):
        reason = SchemaErrorReason.UNKNOWN_TYPE
    else:
        reason = SchemaErrorReason.INVALID_DOCUMENT

    location = ".".join(str(part) for part in loc)
    return SchemaError(
        f"Invalid schema document{where} at {location}: {first.get('msg')}",
        reason=reason,
        table=table,
        column=column,
    )


__all__ = ["ColumnDefinition", "TableDefinition", "SchemaDefinition"]
