"""
Two-level TTL cache for documentation responses.

Entries live in an in-process dict and in one JSON file per key, so a
restarted server still answers repeat queries without refetching.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class DocsCache:
    """
    Memory plus filesystem cache with per-entry TTL.

    Cache Structure:
        {cache_dir}/{md5(key)}.json

    Each file holds ``{"data": ..., "timestamp": <epoch seconds>, "ttl": <seconds>}``.
    Cached data must be JSON-serializable.

    Attributes:
        cache_dir: Directory holding cache files
        default_ttl: TTL in seconds used when ``set`` gets none
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        default_ttl: int = 24 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir is not None else Path.cwd() / ".cache"
        self.default_ttl = default_ttl
        self._clock = clock
        self._memory: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def _hash_key(key: str) -> str:
        return hashlib.md5(key.encode("utf-8")).hexdigest()

    def _get_cache_path(self, key: str) -> Path:
        return self.cache_dir / f"{self._hash_key(key)}.json"

    def _expired(self, entry: Dict[str, Any]) -> bool:
        return self._clock() - entry.get("timestamp", 0) > entry.get("ttl", self.default_ttl)

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached value.

        Returns:
            The cached data if present and fresh, None otherwise
        """
        entry = self._memory.get(key)
        if entry is not None:
            if not self._expired(entry):
                return entry["data"]
            del self._memory[key]

        cache_path = self._get_cache_path(key)
        if not cache_path.exists():
            return None

        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                entry = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read cache entry %s: %s", cache_path, exc)
            return None

        if not isinstance(entry, dict) or "data" not in entry:
            return None
        if self._expired(entry):
            self.delete(key)
            return None

        self._memory[key] = entry
        return entry["data"]

    def set(self, key: str, data: Any, ttl: Optional[int] = None) -> None:
        """
        Store a value in memory and on disk.

        Args:
            key: The cache key
            data: JSON-serializable value
            ttl: Time-to-live in seconds (default: default_ttl)
        """
        entry = {
            "data": data,
            "timestamp": self._clock(),
            "ttl": ttl if ttl is not None else self.default_ttl,
        }
        self._memory[key] = entry

        cache_path = self._get_cache_path(key)
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                json.dump(entry, f)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Failed to write cache entry %s: %s", cache_path, exc)

    def delete(self, key: str) -> None:
        self._memory.pop(key, None)
        try:
            self._get_cache_path(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete cache entry for %s: %s", key, exc)

    def clear(self) -> int:
        """Remove every entry. Returns the number of files deleted."""
        self._memory.clear()
        removed = 0
        if not self.cache_dir.exists():
            return removed
        for cache_file in self.cache_dir.glob("*.json"):
            try:
                cache_file.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Failed to delete cache file %s: %s", cache_file, exc)
        return removed

    def stats(self) -> Dict[str, int]:
        """Entry counts for both levels and the on-disk size in bytes."""
        file_entries = 0
        total_size = 0
        if self.cache_dir.exists():
            for cache_file in self.cache_dir.glob("*.json"):
                try:
                    total_size += cache_file.stat().st_size
                    file_entries += 1
                except OSError:
                    continue
        return {
            "memory_entries": len(self._memory),
            "file_entries": file_entries,
            "total_size": total_size,
        }

    def prune(self) -> int:
        """Delete expired entries from both levels. Returns how many were removed."""
        pruned = 0
        for key in [k for k, entry in self._memory.items() if self._expired(entry)]:
            del self._memory[key]
            pruned += 1

        if not self.cache_dir.exists():
            return pruned

        for cache_file in self.cache_dir.glob("*.json"):
            try:
                with open(cache_file, "r", encoding="utf-8") as f:
                    entry = json.load(f)
                if isinstance(entry, dict) and self._expired(entry):
                    cache_file.unlink()
                    pruned += 1
            except (json.JSONDecodeError, OSError) as exc:
                logger.debug("Skipping unreadable cache file %s: %s", cache_file, exc)
        return pruned


class NullCache(DocsCache):
    """Cache that stores nothing. Used when caching is disabled."""

    def __init__(self) -> None:
        super().__init__(cache_dir=None)

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, data: Any, ttl: Optional[int] = None) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def clear(self) -> int:
        return 0

    def stats(self) -> Dict[str, int]:
        return {"memory_entries": 0, "file_entries": 0, "total_size": 0}

    def prune(self) -> int:
        return 0


def create_cache(enabled: bool, cache_dir: Path, default_ttl: int) -> DocsCache:
    """Build the cache selected by configuration."""
    if not enabled:
        return NullCache()
    return DocsCache(cache_dir=cache_dir, default_ttl=default_ttl)
