"""Custom database column types for cross-database compatibility."""
from __future__ import annotations

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON text elsewhere (SQLite in tests).
JSONDocument = JSON().with_variant(JSONB(), "postgresql")

__all__ = ["JSONDocument"]
