"""Relational schema of the travel journal.

Usage:
    from travel_backup.schema import metadata, JSONB_COLUMNS
"""

from travel_backup.schema.tables import JSONB_COLUMNS, metadata

__all__ = ["metadata", "JSONB_COLUMNS"]
