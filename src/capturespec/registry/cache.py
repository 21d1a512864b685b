"""TTL cache for registry list results, optionally persisted to a JSON file."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger("capturespec.registry.cache")


@dataclass
class CacheEntry:
    value: Any
    expires_at: float  # wall clock, so persisted entries stay meaningful


class TTLCache:
    """String-keyed cache whose entries expire ``ttl_seconds`` after being stored.

    Values must be JSON-serializable when a ``path`` is given; the file is
    rewritten on every store/clear and read once at construction.  Failed
    fetches are never cached.
    """

    def __init__(
        self,
        ttl_seconds: float,
        path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._path = path
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}
        if path is not None:
            self._load()

    # -- persistence ---------------------------------------------------------

    def _load(self) -> None:
        assert self._path is not None
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self._path, exc)
            return
        if not isinstance(raw, dict):
            return
        now = self._clock()
        for key, item in raw.items():
            if isinstance(item, dict) and item.get("expires_at", 0) > now:
                self._entries[key] = CacheEntry(item.get("value"), float(item["expires_at"]))
        logger.debug("Loaded %d cache entries from %s", len(self._entries), self._path)

    def _save(self) -> None:
        if self._path is None:
            return
        data = {k: {"value": e.value, "expires_at": e.expires_at} for k, e in self._entries.items()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to write cache file %s: %s", self._path, exc)

    # -- public API ----------------------------------------------------------

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key`` or ``None`` (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                self._save()
                return None
            return entry.value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value, self._clock() + self._ttl)
            self._save()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._save()
        logger.info("Registry cache cleared")

    async def get_or_fetch(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key``, calling ``fetch`` on a miss."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for '%s'", key)
            return cached
        logger.debug("Cache miss for '%s'", key)
        value = await fetch()
        self.put(key, value)
        return value
