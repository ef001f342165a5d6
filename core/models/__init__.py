# ============================================================================
# CLAUDE CONTEXT - MODELS MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Model exports
# PURPOSE: Central export point for schema document models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for dialect-neutral schema documents.
"""

from core.models.schema import ColumnDefinition, TableDefinition, SchemaDefinition

__all__ = [
    "ColumnDefinition",
    "TableDefinition",
    "SchemaDefinition",
]
