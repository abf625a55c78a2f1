"""In-memory implementation of the ``DatabaseClient`` protocol.

Used for development and tests.  Rows are plain dicts kept per table,
ids are assigned from a per-table counter, and ``transaction()`` restores a
snapshot of every table when the block raises.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from sqlalchemy import MetaData


class InMemoryAdapter:
    """Simple in-memory database for development and tests."""

    def __init__(self, pk: str = "id") -> None:
        self.pk = pk
        self.tables: Dict[str, List[dict]] = {}
        self._next_ids: Dict[str, int] = {}

    def _rows(self, table: str) -> List[dict]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row: dict, filters: dict[str, Any] | None) -> bool:
        if not filters:
            return True
        return all(row.get(k) == v for k, v in filters.items())

    async def select(
        self,
        table: str,
        columns: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        rows = [r for r in self._rows(table) if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is not None, r.get(order_by)))
        if columns.strip() != "*":
            wanted = [c.strip() for c in columns.split(",")]
            return [{c: copy.deepcopy(r.get(c)) for c in wanted} for r in rows]
        return copy.deepcopy(rows)

    async def insert(self, table: str, data: dict) -> dict:
        row = {k: copy.deepcopy(v) for k, v in data.items() if not k.startswith("_")}
        if row.get(self.pk) is None:
            next_id = self._next_ids.get(table, 1)
            row[self.pk] = next_id
            self._next_ids[table] = next_id + 1
        else:
            self._next_ids[table] = max(self._next_ids.get(table, 1), row[self.pk] + 1)
        self._rows(table).append(row)
        return copy.deepcopy(row)

    async def update(self, table: str, data: dict, filters: dict[str, Any]) -> dict:
        matched = [r for r in self._rows(table) if self._matches(r, filters)]
        if not matched:
            raise ValueError(f"No rows matched filters: {filters}")
        for row in matched:
            row.update(copy.deepcopy(data))
        return copy.deepcopy(matched[0])

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        if not filters:
            raise ValueError(f"Refusing to delete from {table} without filters")
        self.tables[table] = [
            r for r in self._rows(table) if not self._matches(r, filters)
        ]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["InMemoryAdapter"]:
        snapshot = (copy.deepcopy(self.tables), dict(self._next_ids))
        try:
            yield self
        except BaseException:
            self.tables, self._next_ids = snapshot
            raise

    async def create_schema(self, metadata: MetaData) -> None:
        for name in metadata.tables:
            self.tables.setdefault(name, [])

    async def close(self) -> None:
        return None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.tables.clear()
        self._next_ids.clear()

    def count(self, table: str, **filters: Any) -> int:
        return len([r for r in self._rows(table) if self._matches(r, filters)])
