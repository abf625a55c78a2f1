"""Database adapters package.

Provides the ``DatabaseClient`` Protocol and concrete async adapter
implementations for PostgreSQL and an in-memory store.

Usage:
    from travel_backup.adapters import DatabaseClient, AsyncPostgresAdapter
    from travel_backup.adapters import InMemoryAdapter
"""

from travel_backup.adapters.base import DatabaseClient
from travel_backup.adapters.memory import InMemoryAdapter
from travel_backup.adapters.postgres import AsyncPostgresAdapter

__all__ = [
    "DatabaseClient",
    "AsyncPostgresAdapter",
    "InMemoryAdapter",
]
