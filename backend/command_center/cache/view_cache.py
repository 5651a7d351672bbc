"""Process-local cache of computed dashboard views keyed by view path."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional


def _normalize_path(path: str) -> str:
    normalized = "/" + path.strip().strip("/")
    if normalized == "/" and not path.strip():
        raise ValueError("View path cannot be empty.")
    return normalized


@dataclass
class _ViewEntry:
    payload: Any
    cached_at: datetime


class ViewCache:
    """Holds rendered view payloads until a mutation revalidates their path."""

    def __init__(self) -> None:
        self._entries: Dict[str, _ViewEntry] = {}
        # Bumped on every invalidation of a key.
        self._generations: Dict[str, int] = {}
        self._lock = RLock()

    def get(self, path: str) -> Optional[Any]:
        key = _normalize_path(path)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        payload = entry.payload
        if hasattr(payload, "model_copy"):
            return payload.model_copy(deep=True)
        return payload

    def set(self, path: str, payload: Any, *, generation: Optional[int] = None) -> bool:
        """Store ``payload``; with ``generation``, only if ``path`` was not invalidated since."""
        key = _normalize_path(path)
        if hasattr(payload, "model_copy"):
            payload = payload.model_copy(deep=True)
        with self._lock:
            if generation is not None and self._generations.get(key, 0) != generation:
                return False
            self._entries[key] = _ViewEntry(payload=payload, cached_at=datetime.now(timezone.utc))
        return True

    def generation(self, path: str) -> int:
        key = _normalize_path(path)
        with self._lock:
            return self._generations.get(key, 0)

    def get_or_build(self, path: str, builder: Callable[[], Any]) -> Any:
        """Return the cached view or build it.

        A build that overlaps an invalidation of the same path is returned to
        the caller but not stored.
        """
        cached = self.get(path)
        if cached is not None:
            return cached
        generation = self.generation(path)
        payload = builder()
        self.set(path, payload, generation=generation)
        return payload

    def invalidate(self, *paths: str) -> List[str]:
        """Drop the given paths; returns the keys that were actually cached."""
        dropped: List[str] = []
        with self._lock:
            for path in paths:
                key = _normalize_path(path)
                self._generations[key] = self._generations.get(key, 0) + 1
                if self._entries.pop(key, None) is not None:
                    dropped.append(key)
        return dropped

    def invalidate_many(self, paths: Iterable[str]) -> List[str]:
        return self.invalidate(*paths)

    def cached_paths(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    def clear(self) -> None:
        with self._lock:
            for key in self._entries:
                self._generations[key] = self._generations.get(key, 0) + 1
            self._entries.clear()


view_cache = ViewCache()

__all__ = ["ViewCache", "view_cache"]
