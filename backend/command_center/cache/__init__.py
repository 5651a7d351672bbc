"""In-memory caches shared across backend services."""

from .view_cache import ViewCache, view_cache

__all__ = ["ViewCache", "view_cache"]
