# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA COMPILATION
# STATUS: Core - Configuration
# PURPOSE: Connection and applier settings
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides explicit settings objects for connections and schema application.
"""

from core.config.settings import (
    REDACTED,
    DatabaseSettings,
    ApplierSettings,
)

__all__ = [
    "REDACTED",
    "DatabaseSettings",
    "ApplierSettings",
]
