"""
Identity resolution for canonical entities.

A statement repeats the same ISRC / work number on many rows. The resolver
memoizes natural key -> id for the duration of one ingestion run so each
distinct key costs at most one storage round trip, and the storage layer's
get-or-create covers races between concurrent uploads.
"""

import logging
from typing import Any, Awaitable, Callable, Dict
from uuid import UUID

logger = logging.getLogger(__name__)


# (natural_key, attributes) -> persisted entity with an `id`
GetOrCreate = Callable[[str, Dict[str, Any]], Awaitable[Any]]


class IdentityResolver:
    """Batch-local memo in front of a get-or-create storage call."""

    def __init__(self, get_or_create: GetOrCreate):
        self._get_or_create = get_or_create
        self._resolved: Dict[str, UUID] = {}

    async def resolve(self, key: str, attributes: Dict[str, Any]) -> UUID:
        """Return the id for `key`, creating the entity from `attributes` if new."""
        cached = self._resolved.get(key)
        if cached is not None:
            return cached

        entity = await self._get_or_create(key, attributes)
        self._resolved[key] = entity.id
        return entity.id

    @property
    def distinct_count(self) -> int:
        """Number of distinct keys resolved so far."""
        return len(self._resolved)

    def __contains__(self, key: str) -> bool:
        return key in self._resolved
