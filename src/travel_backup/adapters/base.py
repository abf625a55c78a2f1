"""Database client protocol definition.

Defines the ``DatabaseClient`` Protocol that all adapters must implement.
All methods are ``async def`` -- the library is async-first.

A filter value of ``None`` matches SQL ``NULL`` (``column IS NULL``).

Usage:
    from travel_backup.adapters.base import DatabaseClient

    async def do_work(client: DatabaseClient) -> None:
        rows = await client.select("trips", "id, title", filters={"user_id": 1})
        async with client.transaction() as tx:
            trip = await tx.insert("trips", {"user_id": 1, "title": "Rome"})
            await tx.insert("trip_languages", {"trip_id": trip["id"], "language_code": "it"})
        await client.close()
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from sqlalchemy import MetaData


class DatabaseClient(Protocol):
    """Database client interface that all adapters must implement.

    All methods are async -- callers must ``await`` every operation.
    Outside a transaction every write commits on its own.
    """

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Select rows from table.

        Args:
            table: Table name.
            columns: Comma-separated column names (e.g., ``"id, name"``) or ``"*"``.
            filters: Optional dict of field=value filters (all must match via AND).
            order_by: Optional column name to sort by.

        Returns:
            List of dicts, one per row.  Empty list if no matches.
        """
        ...

    async def insert(self, table: str, data: dict) -> dict:
        """Insert row into table and return the created row.

        Returns:
            Dict representing the created row (includes the generated id).

        Raises:
            Exception: If duplicate key or constraint violation.
        """
        ...

    async def update(self, table: str, data: dict, filters: dict[str, Any]) -> dict:
        """Update rows in table and return the first updated row.

        Raises:
            ValueError: If no rows match filters.
        """
        ...

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete rows from table matching all filters."""
        ...

    def transaction(self) -> AbstractAsyncContextManager["DatabaseClient"]:
        """Open a transaction and yield a client bound to it.

        Every call made through the yielded client commits together when the
        block exits normally and rolls back together when it raises.

        Example:
            async with client.transaction() as tx:
                await tx.delete("trips", {"user_id": 1})
                await tx.insert("trips", {"user_id": 1, "title": "Rome"})
        """
        ...

    async def create_schema(self, metadata: MetaData) -> None:
        """Create every table in ``metadata`` that does not exist yet."""
        ...

    async def close(self) -> None:
        """Close database connection and clean up resources."""
        ...
