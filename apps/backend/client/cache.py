"""Keyed query cache with invalidate-and-refetch semantics."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]


class QueryCache:
    """
    Caches query results by key. Keys are tuples whose first element names
    the query (e.g. ``("search", "dune")``, ``("rewalist",)``).

    Concurrent reads of the same key share one fetch. ``invalidate`` drops
    entries so the next read refetches; a fetch that was in flight when its
    key was invalidated does not repopulate the cache.
    """

    def __init__(self):
        self._entries: Dict[QueryKey, Any] = {}
        self._inflight: Dict[QueryKey, asyncio.Future] = {}
        self._generation: Dict[Hashable, int] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    async def get_or_fetch(self, key: QueryKey, fetch: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        if key in self._inflight:
            return await asyncio.shield(self._inflight[key])

        generation = self._generation.get(key[0], 0)
        future = asyncio.ensure_future(fetch())
        self._inflight[key] = future
        try:
            value = await asyncio.shield(future)
        finally:
            if self._inflight.get(key) is future:
                del self._inflight[key]

        if self._generation.get(key[0], 0) == generation:
            self._entries[key] = value
        return value

    def invalidate(self, name: Optional[Hashable] = None) -> int:
        """Drop every entry for query ``name`` (all entries when None). Returns the count."""
        if name is None:
            names = {key[0] for key in self._entries} | {key[0] for key in self._inflight}
        else:
            names = {name}

        keys = [key for key in self._entries if key[0] in names]
        for key in keys:
            del self._entries[key]
        for query_name in names:
            self._generation[query_name] = self._generation.get(query_name, 0) + 1
        logger.debug("Invalidated %d cached quer(ies) for %s", len(keys), sorted(map(str, names)))
        return len(keys)
