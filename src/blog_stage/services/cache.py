"""Process-local cache for anonymous GraphQL reads."""
from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    expires_at: float
    collections: frozenset[str]


def cache_key(operation_name: str, variables: Mapping[str, Any] | None) -> str:
    """Return a stable key for an operation and its variables."""
    encoded = json.dumps(variables or {}, sort_keys=True, separators=(",", ":"), default=str)
    return f"{operation_name}:{encoded}"


class QueryCache:
    """TTL + LRU cache whose entries are tagged with the collections they read.

    Entries expire after ``ttl_seconds`` (the public revalidation window) and
    the least recently used entry is dropped once ``max_entries`` is exceeded.
    Writes invalidate by collection: ``evict("postsCollection")`` removes every
    cached read that touched posts.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: Any, collections: Iterable[str]) -> None:
        """Store ``value`` tagged with the collections it was read from."""
        if self.ttl_seconds <= 0 or self.max_entries <= 0:
            return
        with self._lock:
            self._entries[key] = _Entry(
                value=value,
                expires_at=self._clock() + self.ttl_seconds,
                collections=frozenset(collections),
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def evict(self, collection: str) -> int:
        """Drop every entry that read ``collection`` and return how many went."""
        with self._lock:
            stale = [key for key, entry in self._entries.items() if collection in entry.collections]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Evicted %d cached reads of %s", len(stale), collection)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
