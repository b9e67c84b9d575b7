"""Persistent cache of previously probed paths, partitioned per target."""

import hashlib
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_CACHE_FILE = ".vibetest-cache.json"


def hash_base_url(base_url: str) -> str:
    """Stable digest of the exact base URL string used as the cache key."""
    return hashlib.md5(base_url.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheStats:
    """Counts of cached probe outcomes for one target."""

    total_cached: int = 0
    existing_paths: int = 0
    not_found_paths: int = 0


class RouteCache:
    """JSON-file backed route cache.

    The cache is advisory: read failures yield an empty store and write
    failures are dropped.
    """

    def __init__(self, cache_file: Path | str | None = None):
        self.cache_file = Path(cache_file) if cache_file else Path.cwd() / DEFAULT_CACHE_FILE

    def load(self) -> dict[str, Any]:
        """Load the whole store from disk."""
        if not self.cache_file.exists():
            return {}
        try:
            with self.cache_file.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError):
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def save(self, store: dict[str, Any]) -> None:
        """Overwrite the store on disk."""
        try:
            self.cache_file.write_text(json.dumps(store, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("Could not write route cache %s: %s", self.cache_file, exc)

    def _entries(self, store: dict[str, Any], base_url: str) -> list[CacheEntry]:
        record = store.get(hash_base_url(base_url))
        if not isinstance(record, dict):
            return []
        raw_entries = record.get("entries")
        if not isinstance(raw_entries, list):
            return []
        entries: list[CacheEntry] = []
        for raw in raw_entries:
            if not isinstance(raw, dict):
                continue
            try:
                entries.append(CacheEntry.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                continue
        return entries

    def get_cached_paths(self, base_url: str) -> set[str]:
        """Every path ever probed for this target, found or not."""
        return {entry.path for entry in self._entries(self.load(), base_url)}

    def get_cached_existing_paths(self, base_url: str) -> list[CacheEntry]:
        """Entries for paths that existed when last probed."""
        return [entry for entry in self._entries(self.load(), base_url) if entry.exists]

    def update_cache(self, base_url: str, new_entries: Iterable[CacheEntry]) -> None:
        """Upsert entries by path and persist the store."""
        store = self.load()
        key = hash_base_url(base_url)
        entries = self._entries(store, base_url)
        index = {entry.path: position for position, entry in enumerate(entries)}

        for entry in new_entries:
            position = index.get(entry.path)
            if position is None:
                index[entry.path] = len(entries)
                entries.append(entry)
            else:
                entries[position] = entry

        store[key] = {
            "baseUrl": base_url,
            "entries": [entry.to_dict() for entry in entries],
        }
        self.save(store)

    def clear_cache(self, base_url: str | None = None) -> None:
        """Drop one target's record, or the whole cache file when no target is given."""
        if base_url is None:
            try:
                self.cache_file.unlink(missing_ok=True)
            except OSError as exc:
                logger.debug("Could not remove route cache %s: %s", self.cache_file, exc)
            return

        store = self.load()
        if store.pop(hash_base_url(base_url), None) is not None:
            self.save(store)

    def get_cache_stats(self, base_url: str) -> CacheStats:
        entries = self._entries(self.load(), base_url)
        existing = sum(1 for entry in entries if entry.exists)
        return CacheStats(
            total_cached=len(entries),
            existing_paths=existing,
            not_found_paths=len(entries) - existing,
        )
