"""Old-id to new-id mapping built during a single restore.

One ``IdRemapper`` is created per restore call and passed through every
step.  Trip-scoped entities live in a child created with ``child()`` so two
trips may reuse the same backup-local ids.

Usage:
    remap = IdRemapper()
    remap.record(TAG, "Beach", 12)

    trip_ids = remap.child()
    trip_ids.record(EntityType.LOCATION, 1, 101)
    trip_ids.resolve(EntityType.LOCATION, 1)   # 101
    trip_ids.resolve(TAG, "Beach")             # 12 (from parent)
"""

from __future__ import annotations

from collections.abc import Hashable
from enum import Enum

# Kinds that are not entity-link types
TRIP_SERIES = "TRIP_SERIES"
TAG = "TAG"  # keyed by name
COMPANION = "COMPANION"  # keyed by name
LOCATION_CATEGORY = "LOCATION_CATEGORY"  # keyed by name


def _kind(kind: str) -> str:
    return kind.value if isinstance(kind, Enum) else kind


class IdRemapper:
    """Mapping from ``(kind, backup-local key)`` to a newly assigned id."""

    def __init__(self, parent: IdRemapper | None = None) -> None:
        self._parent = parent
        self._maps: dict[str, dict[Hashable, int]] = {}

    def record(self, kind: str, old_key: Hashable, new_id: int) -> None:
        """Remember that ``old_key`` of ``kind`` was created as ``new_id``.

        A ``None`` key is ignored (the entity carried no backup-local id).
        """
        if old_key is None:
            return
        self._maps.setdefault(_kind(kind), {})[old_key] = new_id

    def resolve(self, kind: str, old_key: Hashable | None) -> int | None:
        """Return the new id for ``old_key``, or ``None`` if it was never created."""
        if old_key is None:
            return None
        new_id = self._maps.get(_kind(kind), {}).get(old_key)
        if new_id is None and self._parent is not None:
            return self._parent.resolve(kind, old_key)
        return new_id

    def child(self) -> IdRemapper:
        """Return a scope whose lookups fall back to this one."""
        return IdRemapper(parent=self)
